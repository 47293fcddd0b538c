"""Timestamped, optionally throttled flow logging for paging diagnostics."""

import time

from pagegrid.utils.settings import settings, DEFAULT_SETTINGS

_flow_log_last: dict[str, float] = {}


def flow_trace_enabled() -> bool:
    try:
        return bool(settings.value('flow_trace_logs',
                                   defaultValue=DEFAULT_SETTINGS['flow_trace_logs'],
                                   type=bool))
    except Exception:
        return False


def log_flow(component: str, message: str, *, level: str = "DEBUG",
             throttle_key: str | None = None, every_s: float | None = None):
    """Print a `[TRACE]` line when flow tracing is switched on in settings.

    With `throttle_key` and `every_s`, lines sharing a key are printed at
    most once per `every_s` seconds.
    """
    if not flow_trace_enabled():
        return

    now = time.time()
    if throttle_key and every_s is not None:
        last = _flow_log_last.get(throttle_key, 0.0)
        if (now - last) < every_s:
            return
        _flow_log_last[throttle_key] = now
    ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
    print(f"[{ts}][TRACE][{component}][{level}] {message}")

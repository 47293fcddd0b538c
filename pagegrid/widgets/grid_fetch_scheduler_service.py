from functools import partial
from typing import Callable, Dict, Iterable, List, Optional

from pagegrid.models.page_fetch_state import (PageFetchState, PageStatus,
                                              complete_page, fail_page,
                                              request_page, retry_page)
from pagegrid.models.row_store import RowStore
from pagegrid.utils.data_source import DataSource
from pagegrid.utils.flow_log import log_flow
from pagegrid.widgets.grid_window_planner_service import PlannedPage


def _deliver_now(callback: Callable[[], None]):
    callback()


class FetchScheduler:
    """
    Owns page fetch state and issues page fetches on an executor.

    `schedule()` issues every planned page that has never been requested,
    visible pages first. A page that is already loading, fetched or errored is
    skipped, so replanning the same window never duplicates a fetch.

    Completions come back on the executor's thread and are handed to
    `deliver`, which must run the given callable on the thread that owns
    this scheduler (the Qt model routes them through a queued signal). With
    the default `deliver` they run inline, which is what tests rely on.
    """

    def __init__(self, data_source: DataSource, row_store: RowStore, executor, *,
                 deliver: Callable[[Callable[[], None]], None] = _deliver_now,
                 on_state_changed: Optional[Callable[[int, PageStatus], None]] = None,
                 on_page_loaded: Optional[Callable[[int], None]] = None):
        self._data_source = data_source
        self._row_store = row_store
        self._executor = executor
        self._deliver = deliver
        self._on_state_changed = on_state_changed
        self._on_page_loaded = on_page_loaded
        self.state = PageFetchState()
        self._errors: Dict[int, Exception] = {}

    @property
    def page_size(self) -> int:
        return self._row_store.page_size

    @property
    def loading_pages(self) -> frozenset:
        return self.state.loading

    @property
    def errored_pages(self) -> frozenset:
        return self.state.errored

    @property
    def fetched_pages(self) -> frozenset:
        return self.state.fetched

    def status(self, page_index: int) -> PageStatus:
        return self.state.status(page_index)

    def last_error(self, page_index: int) -> Optional[Exception]:
        return self._errors.get(page_index)

    def schedule(self, planned: Iterable[PlannedPage]) -> List[int]:
        """Issue fetches for unrequested planned pages. Returns the issued indices."""
        issued = []
        for planned_page in sorted(planned, key=lambda p: (p.priority, p.page_index)):
            if not self.state.is_unrequested(planned_page.page_index):
                continue
            self._issue(planned_page.page_index)
            issued.append(planned_page.page_index)
        if issued:
            log_flow("FETCH", f"Triggered loads: {issued}")
        return issued

    def retry(self, page_index: int) -> bool:
        """
        Re-arm an errored page so the next planning pass fetches it again.

        Returns False when the page is not errored.
        """
        if self.state.status(page_index) is not PageStatus.ERRORED:
            return False
        self.state = retry_page(self.state, page_index)
        self._errors.pop(page_index, None)
        self._notify_state(page_index)
        return True

    def _issue(self, page_index: int):
        self.state = request_page(self.state, page_index)
        self._notify_state(page_index)
        try:
            future = self._executor.submit(self._data_source.fetch_page,
                                           page_index, self.page_size)
        except Exception as e:
            self._fail(page_index, e)
            return
        future.add_done_callback(
            lambda done, page_index=page_index:
                self._deliver(partial(self._on_fetch_done, page_index, done)))

    def _on_fetch_done(self, page_index: int, future):
        # A page only ever has one outstanding fetch, so a completion
        # always finds its own page in the loading set.
        if self.state.status(page_index) is not PageStatus.LOADING:
            print(f"[FETCH] Ignoring stray completion for page {page_index}")
            return
        try:
            rows = future.result()
        except Exception as e:
            self._fail(page_index, e)
            return

        written = self._row_store.merge_page(page_index, rows or [])
        self.state = complete_page(self.state, page_index)
        log_flow("FETCH", f"Page {page_index} fetched ({written} rows)")
        self._notify_state(page_index)
        if self._on_page_loaded is not None:
            self._on_page_loaded(page_index)

    def _fail(self, page_index: int, error: Exception):
        self.state = fail_page(self.state, page_index)
        self._errors[page_index] = error
        print(f"[FETCH] Page {page_index} failed: {error}")
        self._notify_state(page_index)

    def _notify_state(self, page_index: int):
        if self._on_state_changed is not None:
            self._on_state_changed(page_index, self.state.status(page_index))

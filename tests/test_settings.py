import pytest

from pagegrid.utils import settings as settings_module
from pagegrid.utils.settings import DEFAULT_SETTINGS, GridConfig, GridConfigError


def test_defaults_match_reference_geometry():
    config = GridConfig(total_rows=1000)

    assert config.page_size == 20
    assert config.prefetch_margin == 2
    assert config.overscan == 5
    assert config.throttle_interval_ms == 100
    assert config.total_height == 60_000
    assert config.page_count == 50


def test_page_count_rounds_up_partial_page():
    assert GridConfig(total_rows=45, page_size=20).page_count == 3


@pytest.mark.parametrize("overrides", [
    {'total_rows': 0},
    {'total_rows': -5},
    {'page_size': 0},
    {'row_height': 0},
    {'container_height': -1},
    {'overscan': -1},
    {'prefetch_margin': -1},
    {'throttle_interval_ms': -1},
])
def test_invalid_configuration_fails_fast(overrides):
    kwargs = {'total_rows': 100, **overrides}

    with pytest.raises(GridConfigError):
        GridConfig(**kwargs)


def test_from_settings_reads_shared_settings(monkeypatch):
    stored = {'page_size': 50, 'overscan': 2}

    def fake_value(key, defaultValue=None, type=None):
        return stored.get(key, defaultValue)

    monkeypatch.setattr(settings_module.settings, "value", fake_value)
    config = GridConfig.from_settings(500)

    assert config.total_rows == 500
    assert config.page_size == 50
    assert config.overscan == 2
    assert config.row_height == DEFAULT_SETTINGS['row_height']

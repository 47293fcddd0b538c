import pytest

from pagegrid.utils.range_calculator import EMPTY_RANGE, VisibleRange
from pagegrid.utils.settings import GridConfig
from pagegrid.widgets.grid_window_planner_service import (GridWindowPlannerService,
                                                          PagePriority, PlannedPage,
                                                          plan_pages)


def as_pairs(planned):
    return [(p.page_index, int(p.priority)) for p in planned]


def test_plan_at_top_has_no_pages_below_zero():
    planned = plan_pages(VisibleRange(0, 12), page_size=20, total_rows=1000, prefetch_margin=2)

    assert as_pairs(planned) == [(0, 0), (1, 1), (2, 2)]


def test_plan_mid_dataset_orders_by_priority_then_index():
    planned = plan_pages(VisibleRange(45, 62), page_size=20, total_rows=1000, prefetch_margin=2)

    assert as_pairs(planned) == [
        (2, 0), (3, 0),
        (1, 1), (4, 1),
        (0, 2), (5, 2),
    ]


def test_plan_at_bottom_is_clamped_to_last_page():
    planned = plan_pages(VisibleRange(985, 999), page_size=20, total_rows=1000, prefetch_margin=2)

    assert as_pairs(planned) == [(49, 0), (48, 1), (47, 2)]


def test_plan_with_partial_last_page():
    planned = plan_pages(VisibleRange(40, 44), page_size=20, total_rows=45, prefetch_margin=3)

    assert as_pairs(planned) == [(2, 0), (1, 1), (0, 2)]


def test_prefetch_reaches_margin_pages_from_visible_block():
    planned = plan_pages(VisibleRange(200, 210), page_size=20, total_rows=1000, prefetch_margin=4)

    assert as_pairs(planned) == [
        (10, 0),
        (9, 1), (11, 1),
        (6, 2), (7, 2), (8, 2), (12, 2), (13, 2), (14, 2),
    ]


def test_margin_of_one_adds_no_prefetch_pages():
    planned = plan_pages(VisibleRange(45, 62), page_size=20, total_rows=1000, prefetch_margin=1)

    assert as_pairs(planned) == [(2, 0), (3, 0), (1, 1), (4, 1)]


def test_zero_prefetch_margin_only_adds_adjacent_pages():
    planned = plan_pages(VisibleRange(45, 62), page_size=20, total_rows=1000, prefetch_margin=0)

    assert as_pairs(planned) == [(2, 0), (3, 0), (1, 1), (4, 1)]


@pytest.mark.parametrize("start,end", [(0, 0), (0, 19), (19, 20), (45, 62), (300, 999), (999, 999)])
@pytest.mark.parametrize("page_size", [1, 7, 20, 250])
def test_every_touched_page_is_visible_and_listed_once(start, end, page_size):
    planned = plan_pages(VisibleRange(start, end), page_size=page_size, total_rows=1000,
                         prefetch_margin=2)
    indices = [p.page_index for p in planned]

    assert len(indices) == len(set(indices))
    priorities = {p.page_index: p.priority for p in planned}
    for row_index in range(start, end + 1):
        assert priorities[row_index // page_size] is PagePriority.VISIBLE
    max_page = (1000 - 1) // page_size
    assert all(0 <= index <= max_page for index in indices)


def test_empty_range_plans_nothing():
    assert plan_pages(EMPTY_RANGE, page_size=20, total_rows=1000, prefetch_margin=2) == []


def test_service_clamps_offset_and_plans_from_config():
    config = GridConfig(total_rows=1000, page_size=20, row_height=60,
                        container_height=400, overscan=5, prefetch_margin=2)
    service = GridWindowPlannerService(config)

    visible = service.resolve_visible_range(10_000_000)
    assert visible.end_index == 999
    assert service.resolve_visible_range(-50) == VisibleRange(0, 12)

    planned = service.plan(VisibleRange(0, 12))
    assert planned[0] == PlannedPage(0, PagePriority.VISIBLE)

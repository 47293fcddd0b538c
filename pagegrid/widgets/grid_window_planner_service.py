from dataclasses import dataclass
from enum import IntEnum
from typing import List

from pagegrid.utils.flow_log import log_flow
from pagegrid.utils.range_calculator import VisibleRange, calculate_visible_range
from pagegrid.utils.settings import GridConfig


class PagePriority(IntEnum):
    """Lower value is issued first."""
    VISIBLE = 0
    ADJACENT = 1
    PREFETCH = 2


@dataclass(frozen=True)
class PlannedPage:
    page_index: int
    priority: PagePriority


def plan_pages(visible_range: VisibleRange, page_size: int, total_rows: int,
               prefetch_margin: int) -> List[PlannedPage]:
    """
    Pages that must be resident for `visible_range`, best priority first.

    Pages touching the range are VISIBLE, the page on either side is
    ADJACENT, and the pages after that, out to `prefetch_margin` pages
    from the visible block, are PREFETCH. Everything is clamped to the
    pages that exist; ties are ordered by ascending page index.
    """
    if visible_range.empty or total_rows <= 0:
        return []

    start_page = visible_range.start_index // page_size
    end_page = visible_range.end_index // page_size
    max_page = (total_rows - 1) // page_size

    best: dict[int, PagePriority] = {}

    def offer(page_index: int, priority: PagePriority):
        if page_index < 0 or page_index > max_page:
            return
        current = best.get(page_index)
        if current is None or priority < current:
            best[page_index] = priority

    for page_index in range(start_page, end_page + 1):
        offer(page_index, PagePriority.VISIBLE)
    offer(start_page - 1, PagePriority.ADJACENT)
    offer(end_page + 1, PagePriority.ADJACENT)
    for distance in range(2, prefetch_margin + 1):
        offer(start_page - distance, PagePriority.PREFETCH)
        offer(end_page + distance, PagePriority.PREFETCH)

    return [PlannedPage(page_index, priority)
            for page_index, priority in sorted(best.items(), key=lambda item: (item[1], item[0]))]


class GridWindowPlannerService:
    """Turns a scroll offset into a visible range and the pages it needs."""

    def __init__(self, config: GridConfig):
        self._config = config

    def resolve_visible_range(self, scroll_offset: float) -> VisibleRange:
        config = self._config
        max_offset = max(0, config.total_height - config.container_height)
        scroll_offset = max(0, min(scroll_offset, max_offset))
        return calculate_visible_range(scroll_offset, config.container_height,
                                       config.row_height, config.overscan,
                                       config.total_rows)

    def plan(self, visible_range: VisibleRange) -> List[PlannedPage]:
        config = self._config
        planned = plan_pages(visible_range, config.page_size, config.total_rows,
                             config.prefetch_margin)
        log_flow("PLANNER",
                 f"Range=[{visible_range.start_index}, {visible_range.end_index}] "
                 f"pages={[(p.page_index, int(p.priority)) for p in planned]}",
                 throttle_key="planner_plan", every_s=0.25)
        return planned

from dataclasses import dataclass
from typing import List

from PySide6.QtCore import QObject, Signal

from pagegrid.models.paged_grid_model import PagedGridModel
from pagegrid.models.row_store import RowSlot
from pagegrid.utils.flow_log import log_flow
from pagegrid.utils.range_calculator import EMPTY_RANGE, VisibleRange
from pagegrid.utils.scroll_throttle import ScrollThrottle
from pagegrid.widgets.grid_window_planner_service import (GridWindowPlannerService,
                                                          PlannedPage)


@dataclass(frozen=True)
class GridWindow:
    """What the presentation layer needs to paint one frame."""
    visible_range: VisibleRange
    visible_slice: List[RowSlot]
    loading_pages: frozenset
    errored_pages: frozenset
    total_height: int
    row_height: int
    page_size: int

    def row_offset(self, global_index: int) -> int:
        return global_index * self.row_height

    def page_for_index(self, global_index: int) -> int:
        return global_index // self.page_size


class GridViewport(QObject):
    """
    Drives paging from scroll input.

    Raw scroll offsets go through a `ScrollThrottle`; each accepted offset is
    turned into a visible range, the range into planned pages, and the
    planned pages into fetches. `window_changed` fires whenever the visible
    range moves or a page changes state.
    """

    window_changed = Signal()

    def __init__(self, model: PagedGridModel, parent=None):
        super().__init__(parent)
        self._model = model
        self.config = model.config
        self._planner = GridWindowPlannerService(self.config)
        self._throttle = ScrollThrottle(self.set_scroll_offset,
                                        self.config.throttle_interval_ms, self)
        self.scroll_offset = 0
        self.visible_range: VisibleRange = EMPTY_RANGE
        self.planned_pages: List[PlannedPage] = []
        model.page_state_changed.connect(self._on_page_state_changed)

    @property
    def model(self) -> PagedGridModel:
        return self._model

    def mount(self):
        """Establish the initial range at offset 0 and start fetching."""
        self.set_scroll_offset(0)

    def on_scroll(self, scroll_offset: float):
        """Throttled entry point for raw scroll events."""
        self._throttle(scroll_offset)

    def set_scroll_offset(self, scroll_offset: float):
        """Recompute the window for `scroll_offset` right away."""
        self.scroll_offset = scroll_offset
        self.visible_range = self._planner.resolve_visible_range(scroll_offset)
        self._replan()
        log_flow("GRID", f"Offset={scroll_offset} range=[{self.visible_range.start_index}, "
                         f"{self.visible_range.end_index}]",
                 throttle_key="grid_offset", every_s=0.25)
        self.window_changed.emit()

    def retry(self, page_index: int) -> bool:
        """Re-arm an errored page and fetch it again if it is still needed."""
        if not self._model.retry(page_index):
            return False
        self._replan()
        return True

    def snapshot(self) -> GridWindow:
        scheduler = self._model.scheduler
        return GridWindow(
            visible_range=self.visible_range,
            visible_slice=self._model.row_store.get_visible_slice(self.visible_range),
            loading_pages=scheduler.loading_pages,
            errored_pages=scheduler.errored_pages,
            total_height=self.config.total_height,
            row_height=self.config.row_height,
            page_size=self.config.page_size,
        )

    def _replan(self):
        self.planned_pages = self._planner.plan(self.visible_range)
        self._model.scheduler.schedule(self.planned_pages)

    def _on_page_state_changed(self, page_index: int):
        self.window_changed.emit()

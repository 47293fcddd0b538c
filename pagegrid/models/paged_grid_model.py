"""
Paged table model for grids with far more rows than fit in memory comfortably.

Rows arrive in fixed-size pages from a data source. The model reports the full
row count up front and answers with placeholders for rows whose page has not
landed yet. Page fetches run on a small thread pool; their results are posted
back to the GUI thread before touching the row store.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal

from pagegrid.models.page_fetch_state import PageStatus
from pagegrid.models.row_store import RowStore
from pagegrid.utils.data_source import DataSource
from pagegrid.utils.settings import DEFAULT_SETTINGS, GridConfig, settings
from pagegrid.widgets.grid_fetch_scheduler_service import FetchScheduler

LOADING_TEXT = 'Loading...'
ERRORED_TEXT = 'Failed - click to retry'


class PagedGridModel(QAbstractTableModel):
    """
    Table model over a sparse `RowStore`, fed by a `FetchScheduler`.

    The model never decides what to fetch; the viewport plans pages and calls
    `scheduler.schedule()`. The model only turns fetch results and state
    changes into Qt notifications.
    """

    RowIdRole = Qt.ItemDataRole.UserRole + 1
    SlotStatusRole = Qt.ItemDataRole.UserRole + 2

    # Signals
    page_loaded = Signal(int)  # Emitted when a page's rows are merged (page_num)
    page_state_changed = Signal(int)  # Emitted on every fetch state transition (page_num)
    _fetch_completed = Signal(object)  # Worker -> GUI thread hand-off

    def __init__(self, data_source: DataSource, config: GridConfig,
                 executor=None, parent=None):
        super().__init__(parent)
        self.config = config
        self.row_store = RowStore(config.total_rows, config.page_size)

        self._owns_executor = executor is None
        if executor is None:
            max_workers = settings.value('fetch_workers',
                                         defaultValue=DEFAULT_SETTINGS['fetch_workers'],
                                         type=int)
            executor = ThreadPoolExecutor(max_workers=max(1, max_workers),
                                          thread_name_prefix="page_fetch")
        self._load_executor = executor

        self._fetch_completed.connect(self._run_on_gui_thread,
                                      Qt.ConnectionType.QueuedConnection)
        self.scheduler = FetchScheduler(
            data_source, self.row_store, executor,
            deliver=self._fetch_completed.emit,
            on_state_changed=self._on_page_state_changed,
            on_page_loaded=self._on_page_loaded,
        )
        self._column_count = 1

    # ========== Qt Model Interface ==========

    def rowCount(self, parent=QModelIndex()) -> int:
        """Return total number of rows (not just fetched ones)."""
        if parent.isValid():
            return 0
        return self.config.total_rows

    def columnCount(self, parent=QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._column_count

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None

        row_index = index.row()
        if row_index < 0 or row_index >= self.config.total_rows:
            return None

        if role == self.SlotStatusRole:
            return self.slot_status(row_index)

        row = self.row_store.get_row(row_index)
        if row is None:
            # Not fetched yet - return placeholder data
            if role == Qt.ItemDataRole.DisplayRole:
                status = self.slot_status(row_index)
                if status == PageStatus.LOADING.value:
                    return LOADING_TEXT
                if status == PageStatus.ERRORED.value:
                    return ERRORED_TEXT
                return ''
            return None

        if role == self.RowIdRole:
            return row.id
        if role == Qt.ItemDataRole.DisplayRole:
            column = index.column()
            if column < len(row.cells):
                return row.cells[column].value
            return ''
        if role == Qt.ItemDataRole.ToolTipRole:
            column = index.column()
            if column < len(row.cells):
                return row.cells[column].id
        return None

    def headerData(self, section: int, orientation: Qt.Orientation,
                   role: int = Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Vertical:
            return str(section + 1)
        return f'Column {section + 1}'

    # ========== Page State ==========

    def slot_status(self, row_index: int) -> str:
        """'fetched', 'loading', 'errored' or 'absent' for one row slot."""
        if self.row_store.has_row(row_index):
            return PageStatus.FETCHED.value
        status = self.scheduler.status(self.row_store.page_for_index(row_index))
        if status in (PageStatus.LOADING, PageStatus.ERRORED):
            return status.value
        return 'absent'

    def retry(self, page_index: int) -> bool:
        return self.scheduler.retry(page_index)

    def _run_on_gui_thread(self, callback: Callable[[], None]):
        callback()

    def _emit_page_changed(self, page_index: int):
        start_idx, end_idx = self.row_store.page_bounds(page_index)
        if end_idx >= start_idx:
            self.dataChanged.emit(
                self.index(start_idx, 0),
                self.index(end_idx, self._column_count - 1)
            )

    def _on_page_state_changed(self, page_index: int, status: PageStatus):
        self._emit_page_changed(page_index)
        self.page_state_changed.emit(page_index)

    def _on_page_loaded(self, page_index: int):
        """Called on the GUI thread once a page's rows are in the store."""
        start_idx, end_idx = self.row_store.page_bounds(page_index)
        widest = self._column_count
        for row_index in range(start_idx, end_idx + 1):
            row = self.row_store.get_row(row_index)
            if row is not None:
                widest = max(widest, len(row.cells))
        if widest > self._column_count:
            self.beginInsertColumns(QModelIndex(), self._column_count, widest - 1)
            self._column_count = widest
            self.endInsertColumns()

        self._emit_page_changed(page_index)
        self.page_loaded.emit(page_index)

    def cleanup(self):
        """Clean up resources."""
        if self._owns_executor:
            self._load_executor.shutdown(wait=False)

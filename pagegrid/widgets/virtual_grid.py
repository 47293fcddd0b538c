from PySide6.QtCore import QRect, Qt
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QAbstractScrollArea

from pagegrid.models.paged_grid_model import ERRORED_TEXT, LOADING_TEXT
from pagegrid.widgets.grid_viewport import GridViewport

ROW_BORDER_COLOR = QColor('#aaaaaa')
PLACEHOLDER_COLOR = QColor('#f2f2f2')
ERRORED_COLOR = QColor('#fde2e2')


class VirtualGridWidget(QAbstractScrollArea):
    """
    Fixed-height grid that only paints the rows in the current window.

    Content height is `total_rows * row_height`; each painted row sits at
    `global_index * row_height` minus the scroll offset. Clicking an errored
    placeholder retries its page.
    """

    def __init__(self, viewport_controller: GridViewport, parent=None):
        super().__init__(parent)
        self.grid_viewport = viewport_controller
        config = viewport_controller.config
        self.setFixedHeight(config.container_height + 2 * self.frameWidth())
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll_bar = self.verticalScrollBar()
        scroll_bar.setRange(0, max(0, config.total_height - config.container_height))
        scroll_bar.setSingleStep(config.row_height)
        scroll_bar.setPageStep(config.container_height)
        scroll_bar.valueChanged.connect(self.grid_viewport.on_scroll)
        self.grid_viewport.window_changed.connect(self.viewport().update)

    def scrollContentsBy(self, dx, dy):
        # Rows are painted from the snapshot; no pixel scrolling.
        self.viewport().update()

    def paintEvent(self, event):
        window = self.grid_viewport.snapshot()
        scroll_value = self.verticalScrollBar().value()
        width = self.viewport().width()
        painter = QPainter(self.viewport())
        painter.setPen(QPen(ROW_BORDER_COLOR))
        for slot in window.visible_slice:
            top = window.row_offset(slot.index) - scroll_value
            rect = QRect(0, top, width - 1, window.row_height - 1)
            if rect.bottom() < 0 or rect.top() > self.viewport().height():
                continue
            if slot.present:
                painter.drawRect(rect)
                self._paint_cells(painter, rect, slot.row)
                continue
            page_index = window.page_for_index(slot.index)
            if page_index in window.errored_pages:
                painter.fillRect(rect, ERRORED_COLOR)
                text = ERRORED_TEXT
            else:
                painter.fillRect(rect, PLACEHOLDER_COLOR)
                text = LOADING_TEXT
            painter.drawRect(rect)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, text)
        painter.end()

    def _paint_cells(self, painter: QPainter, rect: QRect, row):
        if not row.cells:
            return
        cell_width = rect.width() // len(row.cells)
        for column, cell in enumerate(row.cells):
            cell_rect = QRect(rect.left() + column * cell_width, rect.top(),
                              cell_width, rect.height())
            if column:
                painter.drawLine(cell_rect.topLeft(), cell_rect.bottomLeft())
            painter.drawText(cell_rect, Qt.AlignmentFlag.AlignCenter, str(cell.value))

    def row_at(self, y: int) -> int:
        config = self.grid_viewport.config
        return (self.verticalScrollBar().value() + y) // config.row_height

    def mouseReleaseEvent(self, event):
        row_index = self.row_at(int(event.position().y()))
        config = self.grid_viewport.config
        if 0 <= row_index < config.total_rows:
            page_index = row_index // config.page_size
            if page_index in self.grid_viewport.model.scheduler.errored_pages:
                self.grid_viewport.retry(page_index)
        super().mouseReleaseEvent(event)

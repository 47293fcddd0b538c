import json
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from pagegrid.models.grid_data import GridDocument, create_large_grid_data
from pagegrid.models.paged_grid_model import PagedGridModel
from pagegrid.utils.data_source import SimulatedDataSource
from pagegrid.utils.settings import DEFAULT_SETTINGS, GridConfig, settings
from pagegrid.widgets.grid_viewport import GridViewport
from pagegrid.widgets.virtual_grid import VirtualGridWidget


def load_demo_document() -> GridDocument:
    """
    Read the grid document named by `demo_document_path`, or build one.

    A generated dataset goes through the same export/import path as a saved
    document, so the demo always runs on a persisted-form grid.
    """
    document_path = settings.value('demo_document_path',
                                   defaultValue=DEFAULT_SETTINGS['demo_document_path'],
                                   type=str)
    if document_path:
        with open(Path(document_path), encoding='utf-8') as f:
            return GridDocument.import_json(json.load(f))
    total_rows = settings.value('demo_total_rows',
                                defaultValue=DEFAULT_SETTINGS['demo_total_rows'],
                                type=int)
    generated = GridDocument(create_large_grid_data(total_rows))
    return GridDocument.import_json(generated.export_json())


class MainWindow(QMainWindow):
    def __init__(self, app=None, document: Optional[GridDocument] = None):
        super().__init__()
        self.app = app
        self.setWindowTitle('PageGrid')

        self.document = document if document is not None else load_demo_document()
        self.data_source = SimulatedDataSource(
            rows=self.document.grid_data,
            latency_ms=settings.value('demo_latency_ms',
                                      defaultValue=DEFAULT_SETTINGS['demo_latency_ms'],
                                      type=int),
            failure_rate=settings.value('demo_failure_rate',
                                        defaultValue=DEFAULT_SETTINGS['demo_failure_rate'],
                                        type=float),
        )
        config = GridConfig.from_settings(self.document.total_rows)
        self.grid_model = PagedGridModel(self.data_source, config, parent=self)
        self.grid_viewport = GridViewport(self.grid_model, parent=self)
        self.grid_widget = VirtualGridWidget(self.grid_viewport)
        self.status_label = QLabel()

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addWidget(self.grid_widget)
        layout.addWidget(self.status_label)
        layout.addStretch()
        self.setCentralWidget(central)

        self.grid_viewport.window_changed.connect(self.update_status)
        self.grid_viewport.mount()

    def update_status(self):
        window = self.grid_viewport.snapshot()
        self.status_label.setText(
            f'Rows {window.visible_range.start_index + 1}-{window.visible_range.end_index + 1}'
            f' of {self.grid_viewport.config.total_rows} | '
            f'loading pages: {len(window.loading_pages)} | '
            f'failed pages: {len(window.errored_pages)}')

    def closeEvent(self, event):
        self.grid_model.cleanup()
        super().closeEvent(event)

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def drain(qapp):
    """Deliver queued signal emissions (fetch completions) on the test thread."""
    def _drain():
        QCoreApplication.sendPostedEvents()
        QCoreApplication.processEvents()
    return _drain

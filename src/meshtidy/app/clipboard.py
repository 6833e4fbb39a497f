"""
System Clipboard (Qt)
=====================
Clipboard implementation backed by the desktop clipboard through PySide6.

CRITICAL: A QGuiApplication must exist before the clipboard is touched. When
none is running (command line use), one is created on first access.
"""
import logging
import sys

from PySide6.QtGui import QGuiApplication

logger = logging.getLogger(__name__)


class QtClipboard:
    def __init__(self) -> None:
        self._app = QGuiApplication.instance()
        if self._app is None:
            logger.debug("No Qt application running, creating a QGuiApplication for clipboard access")
            self._app = QGuiApplication(sys.argv[:1])

    def set_text(self, text: str) -> None:
        QGuiApplication.clipboard().setText(text)
        logger.info(f"Exported {len(text)} characters to the system clipboard.")

    def text(self) -> str:
        return QGuiApplication.clipboard().text()

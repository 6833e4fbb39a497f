from __future__ import annotations

import logging
import os
from typing import Protocol

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    """Anything that can publish and read back a piece of text."""
    def set_text(self, text: str) -> None: ...
    def text(self) -> str: ...


class MemoryClipboard:
    def __init__(self, initial: str = "") -> None:
        self._text = initial

    def set_text(self, text: str) -> None:
        self._text = text

    def text(self) -> str:
        return self._text


class FileClipboard:
    """Clipboard backed by a text file, for use from the command line."""

    def __init__(self, path: str) -> None:
        self.path = path

    def set_text(self, text: str) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.debug(f"Wrote {len(text)} characters to {self.path}")

    def text(self) -> str:
        if not os.path.exists(self.path):
            logger.warning(f"Clipboard file '{self.path}' does not exist.")
            return ""
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

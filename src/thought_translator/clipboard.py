"""System clipboard access for copying results."""

from __future__ import annotations

import logging

import pyperclip

logger = logging.getLogger(__name__)


class SystemClipboard:
    """Write-only clipboard. Failures are logged and never raised."""

    def copy(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException:
            logger.warning("Clipboard is not available; copy skipped", exc_info=True)
            return False
        return True

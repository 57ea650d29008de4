"""Notifier - user-visible, non-fatal notices (toasts)."""

import logging

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)

INFO = "info"
SUCCESS = "success"
WARNING = "warning"
ERROR = "error"


class Notifier(QObject):
    """Posts short notices for whatever toast widget is listening.

    Signals:
        notice_posted(str, str): level and message.
    """

    notice_posted = Signal(str, str)

    def info(self, message: str) -> None:
        self._post(INFO, message)

    def success(self, message: str) -> None:
        self._post(SUCCESS, message)

    def warning(self, message: str) -> None:
        self._post(WARNING, message)

    def error(self, message: str) -> None:
        self._post(ERROR, message)

    def _post(self, level: str, message: str) -> None:
        logger.debug(f"Notice [{level}]: {message}")
        self.notice_posted.emit(level, message)

"""UI layer - Qt-facing boundary objects."""

from .document_renderer import DocumentRenderer, NoDocumentEngine
from .file_dialogs import QtFilePicker
from .notifier import Notifier

__all__ = ["DocumentRenderer", "NoDocumentEngine", "Notifier", "QtFilePicker"]

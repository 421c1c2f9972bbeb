"""Text storage, edit history and the editing session."""

from .errors import DocumentIOError, OutOfRangeError, TextStoreError
from .history import DEFAULT_HISTORY_LIMIT, Edit, EditHistory
from .session import EditorSession, SessionView, Transaction
from .state import Cursor, CursorState, Selection
from .store import DEFAULT_GAP, TextStore

__all__ = [
    "Cursor",
    "CursorState",
    "DEFAULT_GAP",
    "DEFAULT_HISTORY_LIMIT",
    "DocumentIOError",
    "Edit",
    "EditHistory",
    "EditorSession",
    "OutOfRangeError",
    "Selection",
    "SessionView",
    "TextStore",
    "TextStoreError",
    "Transaction",
]

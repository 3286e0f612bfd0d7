"""Qt item models binding the controller's lists to views."""
from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

from PyQt6.QtCore import QAbstractListModel, QAbstractTableModel, QModelIndex, Qt
from PyQt6.QtGui import QBrush, QColor

from ..models import Message
from .styles import FORWARDED_FG, OWN_MESSAGE_BG

Column = Tuple[str, Callable[[Any], Any]]

ID_ROLE = Qt.ItemDataRole.UserRole + 1


class RecordTableModel(QAbstractTableModel):
    """Table over a list of dataclass rows; each column is (header, getter)."""

    def __init__(self, columns: Sequence[Column], id_getter: Callable[[Any], int], parent=None):
        super().__init__(parent)
        self._columns = list(columns)
        self._id_getter = id_getter
        self._rows: List[Any] = []

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._columns)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            value = self._columns[index.column()][1](row)
            if isinstance(value, bool):
                return "Yes" if value else "No"
            return str(value)
        if role == ID_ROLE:
            return self._id_getter(row)
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return self._columns[section][0]
        return str(section + 1)

    def set_rows(self, rows: List[Any]) -> None:
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def row_at(self, index: QModelIndex) -> Optional[Any]:
        if not index.isValid() or index.row() >= len(self._rows):
            return None
        return self._rows[index.row()]


def chat_table_model(parent=None) -> RecordTableModel:
    columns = [
        ("ID", lambda c: c.id),
        ("Name", lambda c: c.name),
        ("Group", lambda c: c.is_group),
        ("Created by", lambda c: c.created_by),
        ("Created at", lambda c: c.created_at),
    ]
    return RecordTableModel(columns, lambda c: c.id, parent)


def contact_table_model(parent=None) -> RecordTableModel:
    return RecordTableModel([("ID", lambda c: c.user_id), ("Name", lambda c: c.name)], lambda c: c.user_id, parent)


def user_table_model(parent=None) -> RecordTableModel:
    columns = [("ID", lambda u: u.id), ("Name", lambda u: u.name), ("Login", lambda u: u.login)]
    return RecordTableModel(columns, lambda u: u.id, parent)


class MessageListModel(QAbstractListModel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._messages: List[Message] = []

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._messages)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        msg = self._messages[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return msg.display_text()
        if role == ID_ROLE:
            return msg.id
        if role == Qt.ItemDataRole.BackgroundRole and msg.can_edit:
            return QBrush(QColor(OWN_MESSAGE_BG))
        if role == Qt.ItemDataRole.ForegroundRole and msg.is_forwarded:
            return QBrush(QColor(FORWARDED_FG))
        return None

    def set_messages(self, messages: List[Message]) -> None:
        self.beginResetModel()
        self._messages = list(messages)
        self.endResetModel()

    def message_at(self, index: QModelIndex) -> Optional[Message]:
        if not index.isValid() or index.row() >= len(self._messages):
            return None
        return self._messages[index.row()]


__all__ = [
    "ID_ROLE",
    "MessageListModel",
    "RecordTableModel",
    "chat_table_model",
    "contact_table_model",
    "user_table_model",
]

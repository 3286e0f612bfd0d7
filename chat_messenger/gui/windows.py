"""PyQt main window for the chat client."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QModelIndex, QTimer
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QDialog,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QListView,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableView,
    QTabWidget,
    QTextEdit,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from ..api import APIError
from ..logging_config import configure_logging
from ..models import Message
from ..storage import get_last_login
from .app import ChatController, is_duplicate_contact
from .dialogs import (
    AddContactDialog,
    CreateChatDialog,
    LoginDialog,
    RegisterDialog,
    SendMessageDialog,
    ServerConfigDialog,
)
from .styles import MAIN_QSS, TEXT_MUTED
from .table_models import MessageListModel, chat_table_model, contact_table_model

logger = configure_logging()

MESSAGES_TAB, CHATS_TAB, CONTACTS_TAB = range(3)
REFRESH_INTERVAL_MS = 5000


class MainWindow(QMainWindow):
    """Toolbar, message/chat/contact tabs and a status line."""

    def __init__(self, controller: ChatController):
        super().__init__()
        self.controller = controller
        self.reply_to: Optional[Message] = None
        self.setWindowTitle("Chat Messenger")
        self.resize(960, 680)
        self.setStyleSheet(MAIN_QSS)
        self._build_toolbar()
        self._build_ui()
        self.refresh_status()
        self.poller = QTimer(self)
        self.poller.timeout.connect(self._poll_messages)
        self.poller.start(REFRESH_INTERVAL_MS)

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)
        for text, handler in (
            ("Register", self._register),
            ("Login", self._login),
            ("Logout", self._logout),
            ("Chats", self._show_chats),
            ("Contacts", self._show_contacts),
            ("New chat", self._create_chat),
            ("Add contact", self._add_contact),
            ("Quick send", self._quick_send),
            ("Server", self._change_server),
        ):
            action = QAction(text, self)
            action.triggered.connect(handler)
            toolbar.addAction(action)

    def _build_ui(self) -> None:
        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_messages_tab(), "Messages")
        self.tabs.addTab(self._build_chats_tab(), "Chats")
        self.tabs.addTab(self._build_contacts_tab(), "Contacts")
        self.setCentralWidget(self.tabs)
        self.status_label = QLabel()
        self.statusBar().addWidget(self.status_label, 1)

    def _build_messages_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        self.chat_title = QLabel("Select a chat")
        self.chat_title.setStyleSheet("font-size: 16px; font-weight: bold")
        layout.addWidget(self.chat_title)

        self.message_model = MessageListModel(self)
        self.messages_view = QListView()
        self.messages_view.setModel(self.message_model)
        self.messages_view.setWordWrap(True)
        self.messages_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        layout.addWidget(self.messages_view, 1)

        actions = QHBoxLayout()
        for text, handler in (
            ("Reply", self._reply),
            ("Edit", self._edit_message),
            ("Delete", self._delete_message),
            ("Forward", self._forward_message),
        ):
            btn = QPushButton(text)
            btn.clicked.connect(handler)
            actions.addWidget(btn)
        actions.addStretch()
        layout.addLayout(actions)

        self.reply_label = QLabel()
        self.reply_label.setStyleSheet(f"color: {TEXT_MUTED}")
        self.reply_label.hide()
        layout.addWidget(self.reply_label)

        input_row = QHBoxLayout()
        self.message_input = QTextEdit()
        self.message_input.setFixedHeight(80)
        send_btn = QPushButton("Send")
        send_btn.clicked.connect(self._send_message)
        input_row.addWidget(self.message_input, 1)
        input_row.addWidget(send_btn)
        layout.addLayout(input_row)
        return widget

    def _table(self, model) -> QTableView:
        view = QTableView()
        view.setModel(model)
        view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        view.horizontalHeader().setStretchLastSection(True)
        return view

    def _build_chats_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        self.chat_model = chat_table_model(self)
        self.chats_view = self._table(self.chat_model)
        self.chats_view.doubleClicked.connect(self._open_chat)
        self.chats_view.selectionModel().currentRowChanged.connect(self._chat_highlighted)
        layout.addWidget(self.chats_view, 1)
        row = QHBoxLayout()
        open_btn = QPushButton("Open")
        open_btn.clicked.connect(lambda: self._open_chat(self.chats_view.currentIndex()))
        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh_chats)
        row.addWidget(open_btn)
        row.addWidget(refresh_btn)
        row.addStretch()
        layout.addLayout(row)
        return widget

    def _build_contacts_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        self.contact_model = contact_table_model(self)
        self.contacts_view = self._table(self.contact_model)
        layout.addWidget(self.contacts_view, 1)
        row = QHBoxLayout()
        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh_contacts)
        row.addWidget(refresh_btn)
        row.addStretch()
        layout.addLayout(row)
        return widget

    def refresh_status(self) -> None:
        self.status_label.setText(self.controller.status_text())
        chat = self.controller.current_chat
        self.chat_title.setText(chat.name if chat else "Select a chat")

    def _bind_lists(self) -> None:
        self.chat_model.set_rows(self.controller.chats)
        self.contact_model.set_rows(self.controller.contacts)
        self.message_model.set_messages(self.controller.messages)
        if self.controller.messages:
            self.messages_view.scrollToBottom()
        self.refresh_status()

    def _ensure_logged_in(self) -> bool:
        if self.controller.user is None:
            QMessageBox.warning(self, "Error", "Log in first")
            return False
        return True

    def _register(self) -> None:
        dialog = RegisterDialog(self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        try:
            user_id = self.controller.register(dialog.form())
        except (APIError, ValueError) as exc:
            QMessageBox.critical(self, "Error", f"Registration failed: {exc}")
            return
        QMessageBox.information(self, "Registered", f"Registration successful! ID: {user_id}")

    def _login(self) -> None:
        self.controller.reset_chat_state()
        self._clear_reply()
        self._bind_lists()
        dialog = LoginDialog(self, last_login=get_last_login())
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        try:
            self.controller.login(dialog.form())
        except (APIError, ValueError) as exc:
            QMessageBox.critical(self, "Error", f"Login failed: {exc}")
            return
        self._bind_lists()
        QMessageBox.information(self, "Welcome", f"Logged in as {self.controller.user.name}")

    def _logout(self) -> None:
        self.controller.logout()
        self._clear_reply()
        self._bind_lists()

    def refresh_chats(self) -> None:
        if not self._ensure_logged_in():
            return
        try:
            self.controller.load_chats()
        except APIError as exc:
            QMessageBox.warning(self, "Error", f"Failed to load chats: {exc}")
            return
        self.chat_model.set_rows(self.controller.chats)

    def refresh_contacts(self) -> None:
        if not self._ensure_logged_in():
            return
        try:
            self.controller.load_contacts()
        except APIError as exc:
            QMessageBox.warning(self, "Error", f"Failed to load contacts: {exc}")
            return
        self.contact_model.set_rows(self.controller.contacts)

    def _show_chats(self) -> None:
        if self._ensure_logged_in():
            self.refresh_chats()
            self.tabs.setCurrentIndex(CHATS_TAB)

    def _show_contacts(self) -> None:
        if self._ensure_logged_in():
            self.refresh_contacts()
            self.tabs.setCurrentIndex(CONTACTS_TAB)

    def _chat_highlighted(self, current: QModelIndex, _previous: QModelIndex) -> None:
        chat = self.chat_model.row_at(current)
        if chat is None or self.controller.user is None:
            return
        self.controller.select_chat(chat.id)
        self.message_model.set_messages(self.controller.messages)
        self.refresh_status()

    def _open_chat(self, index: QModelIndex) -> None:
        chat = self.chat_model.row_at(index)
        if chat is None:
            return
        self.controller.select_chat(chat.id)
        self._clear_reply()
        self.refresh_messages()
        self.tabs.setCurrentIndex(MESSAGES_TAB)

    def refresh_messages(self) -> None:
        try:
            self.controller.load_messages()
        except (APIError, RuntimeError) as exc:
            logger.warning("LOAD_FAIL messages error=%s", exc)
        self.message_model.set_messages(self.controller.messages)
        if self.controller.messages:
            self.messages_view.scrollToBottom()
        self.refresh_status()

    def _poll_messages(self) -> None:
        if self.controller.user is not None and self.controller.current_chat is not None:
            self.refresh_messages()

    def _create_chat(self) -> None:
        if not self._ensure_logged_in():
            return
        dialog = CreateChatDialog(self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        try:
            self.controller.create_chat(dialog.form())
        except (APIError, ValueError) as exc:
            QMessageBox.critical(self, "Error", str(exc))
            return
        self.chat_model.set_rows(self.controller.chats)
        QMessageBox.information(self, "Success", "Chat created")

    def _add_contact(self) -> None:
        if not self._ensure_logged_in():
            return
        dialog = AddContactDialog(self.controller, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        form = dialog.form()
        label = form.friend_login or f"ID {form.friend_id()}"
        try:
            self.controller.add_contact(form.friend_id())
        except ValueError as exc:
            QMessageBox.warning(self, "Error", str(exc))
            return
        except APIError as exc:
            if is_duplicate_contact(exc):
                QMessageBox.information(self, "Contacts", f"User '{label}' is already in your contacts")
            else:
                QMessageBox.critical(self, "Error", str(exc))
            return
        self.contact_model.set_rows(self.controller.contacts)
        QMessageBox.information(self, "Success", f"User '{label}' added to contacts")

    def _quick_send(self) -> None:
        if not self._ensure_logged_in():
            return
        current = self.controller.current_chat
        dialog = SendMessageDialog(self, chat_id=current.id if current else None)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        form = dialog.form()
        try:
            self.controller.send_message(form.message, chat_id=form.chat_id())
        except (APIError, ValueError) as exc:
            QMessageBox.critical(self, "Error", f"Failed to send: {exc}")
            return
        self.message_model.set_messages(self.controller.messages)

    def _send_message(self) -> None:
        if not self._ensure_logged_in():
            return
        if self.controller.current_chat is None:
            QMessageBox.warning(self, "Error", "Select a chat first")
            return
        text = self.message_input.toPlainText()
        reply_id = self.reply_to.id if self.reply_to else None
        try:
            self.controller.send_message(text, reply_id=reply_id)
        except ValueError as exc:
            QMessageBox.warning(self, "Error", str(exc))
            return
        except APIError as exc:
            QMessageBox.critical(self, "Error", f"Failed to send: {exc}")
            return
        self.message_input.clear()
        self._clear_reply()
        self.message_model.set_messages(self.controller.messages)
        self.messages_view.scrollToBottom()

    def _selected_message(self) -> Optional[Message]:
        message = self.message_model.message_at(self.messages_view.currentIndex())
        if message is None:
            QMessageBox.warning(self, "Error", "Select a message first")
        return message

    def _reply(self) -> None:
        message = self._selected_message()
        if message is None:
            return
        self.reply_to = message
        self.reply_label.setText(f"Replying to {message.user_name}: {message.content[:60]}")
        self.reply_label.show()
        self.message_input.setFocus()

    def _clear_reply(self) -> None:
        self.reply_to = None
        self.reply_label.hide()

    def _edit_message(self) -> None:
        message = self._selected_message()
        if message is None:
            return
        if not message.can_edit:
            QMessageBox.warning(self, "Error", "You can only edit your own messages")
            return
        text, ok = QInputDialog.getText(self, "Edit message", "Message", text=message.content)
        if not ok:
            return
        try:
            self.controller.edit_message(message.id, text)
        except (APIError, ValueError) as exc:
            QMessageBox.critical(self, "Error", str(exc))
            return
        self.message_model.set_messages(self.controller.messages)

    def _delete_message(self) -> None:
        message = self._selected_message()
        if message is None:
            return
        answer = QMessageBox.question(self, "Delete message", "Delete the selected message?")
        if answer != QMessageBox.StandardButton.Yes:
            return
        try:
            self.controller.delete_message(message.id)
        except (APIError, ValueError) as exc:
            QMessageBox.critical(self, "Error", str(exc))
            return
        self.message_model.set_messages(self.controller.messages)

    def _forward_message(self) -> None:
        message = self._selected_message()
        if message is None:
            return
        labels = [chat.label for chat in self.controller.chats]
        if not labels:
            QMessageBox.warning(self, "Error", "No chats to forward to")
            return
        choice, ok = QInputDialog.getItem(self, "Forward message", "Target chat", labels, 0, False)
        if not ok:
            return
        target = self.controller.chats[labels.index(choice)]
        try:
            self.controller.forward_message(message.id, target.id)
        except APIError as exc:
            QMessageBox.critical(self, "Error", str(exc))
            return
        self.message_model.set_messages(self.controller.messages)
        QMessageBox.information(self, "Success", f"Message forwarded to {target.name}")

    def _change_server(self) -> None:
        dialog = ServerConfigDialog(self, prefill=self.controller.base_url)
        if dialog.exec() != QDialog.DialogCode.Accepted or not dialog.server_url():
            return
        self.controller.set_base_url(dialog.server_url())
        self.controller.logout()
        self._bind_lists()


class ChatApplication:
    """Top-level class wiring the controller and main window together."""

    def __init__(self):
        self.app = QApplication.instance() or QApplication([])
        self.controller = ChatController()
        self.main_window = MainWindow(self.controller)

    def run(self) -> int:
        self.main_window.show()
        return self.app.exec()


__all__ = ["ChatApplication", "MainWindow"]

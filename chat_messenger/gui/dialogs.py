"""Modal input dialogs. Each one accepts only when its form validates."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTableView,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from ..api import APIError
from ..forms import AddContactForm, CreateChatForm, LoginForm, RegisterForm, SendMessageForm
from .app import ChatController
from .styles import MAIN_QSS, TEXT_MUTED
from .table_models import user_table_model


class FormDialog(QDialog):
    """Base dialog: OK runs ``form().validate()`` and warns instead of closing on failure."""

    def __init__(self, title: str, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setStyleSheet(MAIN_QSS)

    def _buttons(self, ok_text: str) -> QDialogButtonBox:
        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        buttons.button(QDialogButtonBox.StandardButton.Ok).setText(ok_text)
        buttons.accepted.connect(self._accept_if_valid)
        buttons.rejected.connect(self.reject)
        return buttons

    def form(self):
        raise NotImplementedError

    def _accept_if_valid(self) -> None:
        try:
            self.form().validate()
        except ValueError as exc:
            QMessageBox.warning(self, "Error", str(exc))
            return
        self.accept()


class ServerConfigDialog(QDialog):
    """Dialog used to change the server URL."""

    def __init__(self, parent: QWidget | None = None, prefill: str | None = None):
        super().__init__(parent)
        self.setWindowTitle("Server configuration")
        layout = QFormLayout(self)
        self.url_input = QLineEdit(prefill or "")
        layout.addRow("Server URL", self.url_input)
        btn = QPushButton("Save")
        btn.clicked.connect(self.accept)
        layout.addWidget(btn)

    def server_url(self) -> str:
        return self.url_input.text().strip()


class LoginDialog(FormDialog):
    def __init__(self, parent: QWidget | None = None, last_login: str | None = None):
        super().__init__("Sign in", parent)
        layout = QFormLayout(self)
        self.login_input = QLineEdit(last_login or "")
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        layout.addRow("Login", self.login_input)
        layout.addRow("Password", self.password_input)
        layout.addRow(self._buttons("Log in"))
        if last_login:
            self.password_input.setFocus()

    def form(self) -> LoginForm:
        return LoginForm(self.login_input.text(), self.password_input.text())


class RegisterDialog(FormDialog):
    def __init__(self, parent: QWidget | None = None):
        super().__init__("Register", parent)
        layout = QFormLayout(self)
        self.name_input = QLineEdit()
        self.login_input = QLineEdit()
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        layout.addRow("Name", self.name_input)
        layout.addRow("Login", self.login_input)
        layout.addRow("Password", self.password_input)
        layout.addRow(self._buttons("Register"))

    def form(self) -> RegisterForm:
        return RegisterForm(self.name_input.text(), self.login_input.text(), self.password_input.text())


class CreateChatDialog(FormDialog):
    def __init__(self, parent: QWidget | None = None):
        super().__init__("New chat", parent)
        layout = QFormLayout(self)
        self.name_input = QLineEdit()
        self.group_check = QCheckBox("Group chat")
        self.participants_input = QLineEdit()
        self.participants_input.setPlaceholderText("2, 5, 7")
        hint = QLabel("Participant IDs, comma separated")
        hint.setStyleSheet(f"color: {TEXT_MUTED}")
        layout.addRow("Name", self.name_input)
        layout.addRow(self.group_check)
        layout.addRow("Participants", self.participants_input)
        layout.addRow(hint)
        layout.addRow(self._buttons("Create"))

    def form(self) -> CreateChatForm:
        return CreateChatForm(
            self.name_input.text(), self.group_check.isChecked(), self.participants_input.text()
        )


class SendMessageDialog(FormDialog):
    def __init__(self, parent: QWidget | None = None, chat_id: Optional[int] = None):
        super().__init__("Send message", parent)
        layout = QFormLayout(self)
        self.chat_id_input = QLineEdit(str(chat_id) if chat_id else "")
        self.message_input = QTextEdit()
        self.message_input.setFixedHeight(100)
        layout.addRow("Chat ID", self.chat_id_input)
        layout.addRow("Message", self.message_input)
        layout.addRow(self._buttons("Send"))

    def form(self) -> SendMessageForm:
        return SendMessageForm(self.chat_id_input.text(), self.message_input.toPlainText())


class AddContactDialog(FormDialog):
    """Find a user by login and pick them, or type their ID directly."""

    def __init__(self, controller: ChatController, parent: QWidget | None = None):
        super().__init__("Add contact", parent)
        self.controller = controller
        self.resize(460, 360)
        layout = QVBoxLayout(self)

        search_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("login or name")
        self.search_input.returnPressed.connect(self._search)
        search_btn = QPushButton("Search")
        search_btn.clicked.connect(self._search)
        search_row.addWidget(self.search_input)
        search_row.addWidget(search_btn)
        layout.addLayout(search_row)

        self.result_label = QLabel()
        self.result_label.setStyleSheet(f"color: {TEXT_MUTED}")
        layout.addWidget(self.result_label)

        self.results_model = user_table_model(self)
        self.results_view = QTableView()
        self.results_view.setModel(self.results_model)
        self.results_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.results_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.results_view.horizontalHeader().setStretchLastSection(True)
        self.results_view.doubleClicked.connect(lambda _: self._accept_if_valid())
        layout.addWidget(self.results_view, 1)

        id_row = QFormLayout()
        self.id_input = QLineEdit()
        self.id_input.setPlaceholderText("or enter a user ID")
        id_row.addRow("User ID", self.id_input)
        layout.addLayout(id_row)
        layout.addWidget(self._buttons("Add"))

    def _search(self) -> None:
        self.results_model.set_rows([])
        self.result_label.setText("Searching...")
        try:
            users = self.controller.search_users(self.search_input.text())
        except ValueError as exc:
            self.result_label.clear()
            QMessageBox.warning(self, "Error", str(exc))
            return
        except APIError as exc:
            self.result_label.setText("Search failed")
            QMessageBox.critical(self, "Error", f"Search failed: {exc}")
            return
        self.results_model.set_rows(users)
        self.result_label.setText(f"Found {len(users)} user(s)" if users else "No users found")

    def form(self) -> AddContactForm:
        selected = self.results_view.selectionModel().selectedRows()
        if selected:
            user = self.results_model.row_at(selected[0])
            if user is not None:
                return AddContactForm(str(user.id), user.login)
        return AddContactForm(self.id_input.text())


__all__ = [
    "AddContactDialog",
    "CreateChatDialog",
    "LoginDialog",
    "RegisterDialog",
    "SendMessageDialog",
    "ServerConfigDialog",
]

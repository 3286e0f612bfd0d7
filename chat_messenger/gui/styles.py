"""Shared style constants for the GUI client."""

WINDOW_BG = "#f5f7fa"
TOOLBAR_BG = "#1f2933"
ACCENT = "#3b82f6"
ACCENT_HOVER = "#2563eb"
TEXT_PRIMARY = "#1f2933"
TEXT_MUTED = "#6b7280"
OWN_MESSAGE_BG = "#dbeafe"
FORWARDED_FG = "#7c3aed"
PADDING = 8
BORDER_RADIUS = 6

MAIN_QSS = (
    f"QMainWindow, QDialog {{ background: {WINDOW_BG}; color: {TEXT_PRIMARY}; }}\n"
    f"QLineEdit, QTextEdit, QTableView, QListView {{ background: white; border: 1px solid #d1d5db;"
    f" border-radius: {BORDER_RADIUS}px; }}\n"
    f"QPushButton {{ background: {ACCENT}; color: white; padding: 6px 12px; border-radius: {BORDER_RADIUS}px; }}\n"
    f"QPushButton:hover {{ background: {ACCENT_HOVER}; }}\n"
    f"QPushButton:disabled {{ background: #9ca3af; }}\n"
    f"QToolBar {{ background: {TOOLBAR_BG}; spacing: {PADDING}px; }}\n"
    f"QToolBar QToolButton {{ color: white; padding: 4px 8px; }}"
)

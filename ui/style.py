"""Styly a palety pro Building Graph editor."""
from PySide6.QtGui import QPalette, QColor


def make_light_palette() -> QPalette:
    """Vytvoří světlou paletu barev pro aplikaci."""
    palette = QPalette()

    palette.setColor(QPalette.Window, QColor("#F9FAFB"))
    palette.setColor(QPalette.Base, QColor("white"))
    palette.setColor(QPalette.AlternateBase, QColor("#F3F4F6"))  # střídání řádků v seznamu pater

    palette.setColor(QPalette.WindowText, QColor("#111827"))
    palette.setColor(QPalette.Text, QColor("#111827"))
    palette.setColor(QPalette.ButtonText, QColor("#111827"))
    palette.setColor(QPalette.ToolTipText, QColor("black"))

    palette.setColor(QPalette.Button, QColor("#F3F4F6"))
    palette.setColor(QPalette.Highlight, QColor("#4F46E5"))  # indigo jako výběr v editoru
    palette.setColor(QPalette.HighlightedText, QColor("white"))

    disabled_text = QColor(120, 120, 120)
    palette.setColor(QPalette.Disabled, QPalette.Text, disabled_text)
    palette.setColor(QPalette.Disabled, QPalette.WindowText, disabled_text)
    palette.setColor(QPalette.Disabled, QPalette.ButtonText, disabled_text)

    return palette


def get_application_stylesheet() -> str:
    """Vrátí stylesheet pro toolbary a dokovací panely."""
    return """
        QToolBar {
            background: white;
            border: none;
            spacing: 4px;
        }
        QToolBar QToolButton {
            background: white;
            color: black;
            border: 1px solid #dcdcdc;
            border-radius: 6px;
            padding: 4px 6px;
        }
        QToolBar QToolButton:hover {
            background: #f5f5f5;
        }
        QToolBar QToolButton:checked {
            background: #EEF2FF;
            border-color: #6366F1;
        }
        QToolBar QToolButton:disabled {
            color: #888;
        }
        QDockWidget::title {
            background: #F3F4F6;
            padding: 4px;
        }
    """

"""UI modul pro Building Graph editor."""
from .main_window import MainWindow
from .style import make_light_palette, get_application_stylesheet
from .dialogs import show_api_key_dialog, ensure_api_key

__all__ = [
    'MainWindow',
    'make_light_palette',
    'get_application_stylesheet',
    'show_api_key_dialog',
    'ensure_api_key',
]

"""Entry point pro Building Graph editor."""
from __future__ import annotations
import sys
import traceback

# Okamžitý výpis diagnostiky (line buffering)
sys.stdout.reconfigure(line_buffering=True)
sys.stderr.reconfigure(line_buffering=True)

# Načtení proměnných prostředí ze .env souboru
from dotenv import load_dotenv, find_dotenv
# Qt framework pro GUI
from PySide6.QtWidgets import QApplication, QMessageBox

from ui.main_window import MainWindow
from ui.style import make_light_palette, get_application_stylesheet


def exception_hook(exctype, value, tb):
    """Hook pro zachycení nekontrolovaných výjimek."""
    print("=" * 80)
    print("UNCAUGHT EXCEPTION:")
    print("=" * 80)
    traceback.print_exception(exctype, value, tb)
    print("=" * 80)

    error_msg = ''.join(traceback.format_exception(exctype, value, tb))
    QMessageBox.critical(None, "Chyba aplikace",
                         f"Došlo k neočekávané chybě:\n\n{error_msg}")


def main():
    """Hlavní funkce aplikace - inicializuje a spouští editor."""
    sys.excepthook = exception_hook

    # Konfigurace z .env (OPENAI_API_KEY, OPENAI_MODEL)
    load_dotenv(find_dotenv(), override=True)

    app = QApplication(sys.argv)
    app.setPalette(make_light_palette())
    app.setStyleSheet(get_application_stylesheet())

    try:
        w = MainWindow()
        w.resize(1280, 800)
        w.show()
        sys.exit(app.exec())
    except Exception as e:
        print("=" * 80)
        print("FATAL ERROR:")
        print("=" * 80)
        traceback.print_exc()
        print("=" * 80)
        QMessageBox.critical(None, "Fatální chyba",
                             f"Aplikace nemůže pokračovat:\n\n{str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Dialog s nastavením AI extrakce (OpenAI klíč a model)."""
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
)
from ai.api_key_manager import APIKeyManager

MODEL_CHOICES = ("gpt-4o", "gpt-4o-mini", "gpt-4.1", "gpt-4.1-mini")
KEY_SOURCE_TEXT = {
    "ui": "zadaný v aplikaci",
    "env": "z proměnné OPENAI_API_KEY (.env)",
    "none": "nenastaven",
}


class ExtractionSettingsDialog(QDialog):
    """
    Formulář pro klíč a vision model použitý při extrakci grafu z půdorysu.

    Prázdné pole klíče ponechá aktuální klíč (např. z .env).
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.manager = APIKeyManager()
        self.setWindowTitle("AI extrakce – nastavení")

        self.lbl_current = QLabel(self)
        source = KEY_SOURCE_TEXT[self.manager.key_source()]
        masked = self.manager.masked_key()
        self.lbl_current.setText(f"{masked}  ({source})" if masked else source)

        self.ed_key = QLineEdit(self)
        self.ed_key.setPlaceholderText("sk-… (prázdné = beze změny)")
        self.ed_key.setEchoMode(QLineEdit.Password)

        self.cmb_model = QComboBox(self)
        self.cmb_model.setEditable(True)  # lze zadat i jiný model s podporou obrázků
        self.cmb_model.addItems(MODEL_CHOICES)
        self.cmb_model.setCurrentText(self.manager.get_model())

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, parent=self)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        form = QFormLayout(self)
        form.addRow("Current key", self.lbl_current)
        form.addRow("New API key", self.ed_key)
        form.addRow("Vision model", self.cmb_model)
        form.addRow(buttons)
        self.resize(420, 150)

    def apply(self) -> bool:
        """Zapíše hodnoty do APIKeyManager; vrací True, pokud je pak klíč k dispozici."""
        key = self.ed_key.text().strip()
        if key:
            self.manager.set_api_key(key)
        self.manager.set_model(self.cmb_model.currentText())
        return self.manager.has_api_key()


def show_api_key_dialog(parent) -> bool:
    """
    Otevře nastavení extrakce.

    Returns:
        True, pokud uživatel potvrdil a klíč je k dispozici
    """
    dlg = ExtractionSettingsDialog(parent)
    if dlg.exec() != QDialog.Accepted:
        return False
    if not dlg.apply():
        QMessageBox.warning(parent, "API klíč", "Klíč nemůže být prázdný.")
        return False
    return True


def ensure_api_key(parent) -> bool:
    """Před extrakcí ověří klíč; chybí-li, otevře nastavení."""
    if APIKeyManager().has_api_key() or show_api_key_dialog(parent):
        return True
    QMessageBox.warning(
        parent,
        "API klíč je vyžadován",
        "Extrakce grafu z půdorysu potřebuje OpenAI API klíč\n"
        "(OPENAI_API_KEY v souboru .env nebo menu AI → Settings).",
    )
    return False

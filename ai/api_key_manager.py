"""Nastavení OpenAI pro AI extrakci půdorysů: API klíč a model.

Hodnoty zadané v UI mají přednost před proměnnými prostředí (.env)
a drží se jen v paměti do ukončení aplikace.
"""
import os
from typing import Optional

from constants import DEFAULT_AI_MODEL

KEY_ENV = "OPENAI_API_KEY"
MODEL_ENV = "OPENAI_MODEL"


def _clean(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


class APIKeyManager:
    """Sdílené (singleton) nastavení extrakce pro dialog i volání modelu."""

    _instance: Optional["APIKeyManager"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._key_override = None
            cls._instance._model_override = None
        return cls._instance

    def get_api_key(self) -> Optional[str]:
        return self._key_override or _clean(os.getenv(KEY_ENV))

    def set_api_key(self, api_key: Optional[str]) -> None:
        """Prázdná hodnota zruší klíč z UI a vrátí se ke klíči z prostředí."""
        self._key_override = _clean(api_key)

    def has_api_key(self) -> bool:
        return self.get_api_key() is not None

    def key_source(self) -> str:
        """Odkud pochází aktuální klíč: "ui", "env" nebo "none"."""
        if self._key_override:
            return "ui"
        return "env" if _clean(os.getenv(KEY_ENV)) else "none"

    def masked_key(self) -> str:
        """Zkrácený klíč pro zobrazení v dialogu (např. "sk-…abcd")."""
        key = self.get_api_key()
        if key is None:
            return ""
        if len(key) <= 8:
            return "…" + key[-2:]
        return f"{key[:3]}…{key[-4:]}"

    def get_model(self) -> str:
        return self._model_override or _clean(os.getenv(MODEL_ENV)) or DEFAULT_AI_MODEL

    def set_model(self, model: Optional[str]) -> None:
        self._model_override = _clean(model)

"""Modul pro AI extrakci grafu (místnosti a jejich propojení) z obrázku půdorysu."""
import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

# LangChain framework pro práci s LLM
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from ai.api_key_manager import APIKeyManager
from ai.graph_import import ExtractionError

# Cesty k souborům s prompt šablonami pro AI model (vedle tohoto modulu)
PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"
SYSTEM_PROMPT_FILE = PROMPTS_DIR / "system.prompt"
USER_PROMPT_FILE = PROMPTS_DIR / "human.prompt"


def load_prompt_texts(system_prompt_path: Path, user_prompt_path: Path) -> tuple[str, str]:
    """
    Načte system a user prompt ze souborů.

    Args:
        system_prompt_path: Cesta k souboru se system promptem (instrukce pro AI)
        user_prompt_path: Cesta k souboru s user promptem (šablona s proměnnou floor_level)

    Returns:
        Dvojice (system_prompt, user_prompt) jako textové řetězce
    """
    sys_prompt = system_prompt_path.read_text(encoding="utf-8")
    usr_prompt = user_prompt_path.read_text(encoding="utf-8")
    return sys_prompt, usr_prompt


def build_prompt() -> ChatPromptTemplate:
    """
    Sestaví multimodální ChatPromptTemplate: instrukce + text a obrázek od uživatele.

    Proměnné šablony: floor_level, mime_type, image (base64 bez hlavičky).
    """
    sys_prompt, usr_prompt = load_prompt_texts(SYSTEM_PROMPT_FILE, USER_PROMPT_FILE)
    return ChatPromptTemplate.from_messages([
        ("system", sys_prompt),
        ("human", [
            {"type": "text", "text": usr_prompt},
            {"type": "image_url", "image_url": {"url": "data:{mime_type};base64,{image}"}},
        ]),
    ])


def strip_code_fences(content: str) -> str:
    """Odstraní markdown code fences (```json ... ```), které model občas přidá."""
    content = re.sub(r"^```[a-zA-Z]*|```$", "", content.strip(), flags=re.MULTILINE)
    return content.strip()


def parse_extraction_response(content: str) -> Optional[Dict[str, Any]]:
    """
    Převede textovou odpověď modelu na slovník.

    Returns:
        Slovník s klíči "nodes" a "connections", nebo None pro prázdnou odpověď

    Raises:
        ExtractionError: Odpověď není platný JSON objekt
    """
    content = strip_code_fences(content or "")
    if not content:
        return None
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"AI response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ExtractionError("AI response must be a JSON object.")
    return data


def extract_graph_from_image(image_b64: str, mime_type: str, floor_level: int,
                             model: Optional[str] = None, temperature: float = 0.0) -> Optional[Dict[str, Any]]:
    """
    Pošle obrázek půdorysu modelu a vrátí best-effort strukturu grafu.

    Args:
        image_b64: Obrázek zakódovaný v base64 (bez prefixu data URL)
        mime_type: MIME typ obrázku (např. "image/jpeg")
        floor_level: Úroveň patra, která se předá modelu jako kontext
        model: Název OpenAI modelu (výchozí z nastavení v APIKeyManager)
        temperature: Teplota pro generování (0.0 = deterministické)

    Returns:
        {"nodes": [...], "connections": [...]} nebo None, pokud model nic nevrátil

    Raises:
        ExtractionError: Chybí API klíč nebo volání modelu selhalo
    """
    key_manager = APIKeyManager()
    if not key_manager.has_api_key():
        raise ExtractionError("OpenAI API key is not set.")

    prompt = build_prompt()
    llm = ChatOpenAI(
        model=model or key_manager.get_model(),
        temperature=temperature,
        api_key=key_manager.get_api_key(),
    )

    print(f"[AI] Extracting graph for floor level {floor_level} ({llm.model_name})")
    try:
        resp = (prompt | llm).invoke({"floor_level": floor_level, "mime_type": mime_type, "image": image_b64})
    except Exception as e:
        raise ExtractionError(f"AI extraction failed: {e}") from e

    data = parse_extraction_response(getattr(resp, "content", "") or "")
    if data is None:
        print("[AI] Empty response")
    return data

"""Převody mezi binárními daty obrázku a data URL (obrázky pater jsou vložené v JSON)."""
import base64
from typing import Tuple


def to_data_url(data: bytes, mime_type: str) -> str:
    """Zakóduje binární data do data URL (`data:<mime>;base64,<data>`)."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_url(url: str) -> Tuple[str, str]:
    """
    Rozdělí data URL na MIME typ a base64 část.

    Raises:
        ValueError: Pokud řetězec není base64 data URL
    """
    if not url.startswith("data:") or ";base64," not in url:
        raise ValueError("Not a base64 data URL")
    header, payload = url.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0]
    return mime_type, payload


def from_data_url(url: str) -> bytes:
    """Dekóduje data URL zpět na binární data."""
    _, payload = split_data_url(url)
    return base64.b64decode(payload)


def guess_mime_type(filename: str) -> str:
    """Odhad MIME typu obrázku podle přípony souboru."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return {
        "png": "image/png",
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "gif": "image/gif",
        "bmp": "image/bmp",
        "webp": "image/webp",
    }.get(ext, "application/octet-stream")

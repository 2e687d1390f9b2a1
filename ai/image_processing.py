"""Předzpracování obrázků pater pro AI extrakci (Qt, bez GUI).

Zvýraznění zdí: převod do odstínů šedi a prahování – tmavé pixely (zdi) se
zčerní, vše ostatní zbělí. Výsledek se kóduje jako JPEG.
"""
import base64
from typing import Tuple

from PySide6.QtCore import QBuffer, QByteArray, QIODevice
from PySide6.QtGui import QImage, qRgb

from constants import ENHANCE_JPEG_QUALITY, ENHANCE_THRESHOLD
from utils.data_url import from_data_url, guess_mime_type, split_data_url, to_data_url


def image_from_data_url(url: str) -> QImage:
    """
    Dekóduje data URL na QImage.

    Raises:
        ValueError: Data nejsou čitelný obrázek
    """
    image = QImage.fromData(QByteArray(from_data_url(url)))
    if image.isNull():
        raise ValueError("Image data could not be decoded.")
    return image


def load_image_file(path: str) -> Tuple[str, int, int]:
    """
    Načte obrázek ze souboru pro nové patro.

    Returns:
        (data URL, šířka, výška) v pixelech

    Raises:
        ValueError: Soubor není čitelný obrázek
    """
    with open(path, "rb") as f:
        data = f.read()
    image = QImage.fromData(QByteArray(data))
    if image.isNull():
        raise ValueError(f"Unsupported image file: {path}")
    return to_data_url(data, guess_mime_type(path)), image.width(), image.height()


def threshold_color_table(threshold: int = ENHANCE_THRESHOLD) -> list:
    """Tabulka barev pro 8bit index: hodnota < threshold → černá, jinak bílá."""
    return [qRgb(0, 0, 0) if v < threshold else qRgb(255, 255, 255) for v in range(256)]


def enhance_walls(image: QImage, threshold: int = ENHANCE_THRESHOLD) -> QImage:
    """Vrátí černobílou kopii obrázku s prahovanými odstíny šedi."""
    gray = image.convertToFormat(QImage.Format.Format_Grayscale8)
    # Šedá hodnota pixelu slouží přímo jako index do tabulky barev
    gray.reinterpretAsFormat(QImage.Format.Format_Indexed8)
    gray.setColorTable(threshold_color_table(threshold))
    return gray.convertToFormat(QImage.Format.Format_RGB32)


def encode_jpeg(image: QImage, quality: int = ENHANCE_JPEG_QUALITY) -> str:
    """Zakóduje obrázek jako JPEG a vrátí base64 text."""
    data = QByteArray()
    buf = QBuffer(data)
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buf, "JPEG", quality)
    buf.close()
    return base64.b64encode(bytes(data)).decode("ascii")


def prepare_for_extraction(image_url: str, enhance: bool = False) -> Tuple[str, str, int, int]:
    """
    Připraví obrázek patra pro AI extrakci.

    Args:
        image_url: Obrázek patra jako data URL
        enhance: Zda zvýraznit zdi prahováním

    Returns:
        (base64 obrázku, MIME typ, šířka, výška)
    """
    image = image_from_data_url(image_url)
    if enhance:
        encoded = encode_jpeg(enhance_walls(image))
        print(f"[AI] Enhanced walls ({image.width()}x{image.height()})")
        return encoded, "image/jpeg", image.width(), image.height()
    mime_type, payload = split_data_url(image_url)
    return payload, mime_type, image.width(), image.height()

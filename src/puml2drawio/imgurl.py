"""
Image URLs for public diagram rendering services.

PlantUML server URLs carry the source deflated (raw, no zlib header) and
encoded with the PlantUML base64 alphabet. Mermaid URLs carry a JSON payload
deflated with zlib header (pako) and encoded as URL-safe base64.
"""

from typing import Optional
from urllib.parse import urlencode
import base64
import json
import re
import zlib

PLANTUML_THEMES = (
    "amiga",
    "aws-orange",
    "black-knight",
    "bluegray",
    "blueprint",
    "cerulean-outline",
    "cerulean",
    "crt-amber",
    "crt-green",
    "cyborg-outline",
    "cyborg",
    "hacker",
    "lightgray",
    "mars",
    "materia-outline",
    "materia",
    "metal",
    "mimeograph",
    "minty",
    "plain",
    "reddress-darkblue",
    "reddress-darkgreen",
    "reddress-darkorange",
    "reddress-darkred",
    "reddress-lightblue",
    "reddress-lightgreen",
    "reddress-lightorange",
    "reddress-lightred",
    "sandstone",
    "silver",
    "sketchy-outline",
    "sketchy",
    "spacelab",
    "spacelab-white",
    "superhero-outline",
    "superhero",
    "toy",
    "united",
    "vibrant",
)
PLANTUML_FORMATS = ("svg", "png", "txt", "uml")
PLANTUML_SERVER = "https://www.plantuml.com/plantuml"
PLANTUML_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"

MERMAID_FORMATS = ("png", "svg")
MERMAID_INK_URL = "https://mermaid.ink"
KROKI_URL = "https://kroki.io"

STARTUML_RE = re.compile(r"^(@startuml.*?)$", re.MULTILINE)


def deflate_raw(data: bytes) -> bytes:
    compressor = zlib.compressobj(zlib.Z_DEFAULT_COMPRESSION, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def plantuml_base64(data: bytes) -> str:
    """Encode bytes with PlantUML alphabet, incomplete last group padded with zero bytes."""
    result = []
    for i in range(0, len(data), 3):
        chunk = data[i : i + 3].ljust(3, b"\0")
        bits = (chunk[0] << 16) | (chunk[1] << 8) | chunk[2]
        result.append(PLANTUML_ALPHABET[(bits >> 18) & 0x3F])
        result.append(PLANTUML_ALPHABET[(bits >> 12) & 0x3F])
        result.append(PLANTUML_ALPHABET[(bits >> 6) & 0x3F])
        result.append(PLANTUML_ALPHABET[bits & 0x3F])
    return "".join(result)


def apply_theme(text: str, theme: str) -> str:
    """Insert !theme after first @startuml line, or wrap text if there is none."""
    if STARTUML_RE.search(text):
        return STARTUML_RE.sub(lambda match: f"{match.group(1)}\n!theme {theme}", text, count=1)
    return f"@startuml\n!theme {theme}\n{text}\n@enduml"


def encode_plantuml(
    text: str, theme: Optional[str] = None, format: str = "svg", server: Optional[str] = None
) -> str:
    """
    Build PlantUML server image URL.

    :param text: PlantUML source
    :param theme: optional theme name (see PLANTUML_THEMES), injected as !theme
    :param format: one of PLANTUML_FORMATS
    :param server: server base URL, public server if None
    :return: <server>/<format>/<encoded>
    :raises ValueError: on unknown format
    """
    if format not in PLANTUML_FORMATS:
        raise ValueError(f"Unknown PlantUML format {format}, expected one of {', '.join(PLANTUML_FORMATS)}")
    if theme:
        text = apply_theme(text, theme)
    encoded = plantuml_base64(deflate_raw(text.encode("utf-8")))
    return f"{(server or PLANTUML_SERVER).rstrip('/')}/{format}/{encoded}"


def encode_plantuml_hex(text: str) -> str:
    """PlantUML hex form: ~h + upper case hex of UTF-8 bytes."""
    return "~h" + text.encode("utf-8").hex().upper()


def encode_mermaid(text: str) -> str:
    """
    Encode Mermaid source for mermaid.ink/kroki "pako:" URLs.

    :param text: Mermaid source
    :return: URL-safe base64 without padding
    """
    payload = {"code": text.strip(), "mermaid": {"theme": "default"}}
    data = zlib.compress(json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def build_mermaid_img_url(
    code: str,
    format: str = "png",
    server: str = "mermaid",
    base_url: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> str:
    """
    Build Mermaid image URL.

    :param code: Mermaid source
    :param format: png or svg
    :param server: "mermaid" (mermaid.ink) or "kroki"
    :param base_url: custom service URL
    :param width: optional image width
    :param height: optional image height
    :return: image URL
    :raises ValueError: on unknown format or server
    """
    if format not in MERMAID_FORMATS:
        raise ValueError(f"Unknown Mermaid format {format}, expected one of {', '.join(MERMAID_FORMATS)}")
    encoded = encode_mermaid(code)
    size = {}
    if width:
        size["width"] = width
    if height:
        size["height"] = height

    if server == "kroki":
        base = (base_url or KROKI_URL).rstrip("/")
        query = urlencode(size)
        return f"{base}/mermaid/{format}/{encoded}" + (f"?{query}" if query else "")
    if server == "mermaid":
        base = (base_url or MERMAID_INK_URL).rstrip("/")
        return f"{base}/img/pako:{encoded}?{urlencode({'type': format, **size})}"
    raise ValueError(f"Unknown Mermaid server {server}, expected mermaid or kroki")

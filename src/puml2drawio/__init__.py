"""PlantUML to draw.io converter."""

from puml2drawio.c4 import convert_c4_to_drawio, detect_c4
from puml2drawio.convert import EmptySourceError, convert_plantuml_to_drawio
from puml2drawio.generator import DrawioGenerator
from puml2drawio.imgurl import build_mermaid_img_url, encode_mermaid, encode_plantuml, encode_plantuml_hex
from puml2drawio.parsers import parse

__all__ = [
    "DrawioGenerator",
    "EmptySourceError",
    "build_mermaid_img_url",
    "convert_c4_to_drawio",
    "convert_plantuml_to_drawio",
    "detect_c4",
    "encode_mermaid",
    "encode_plantuml",
    "encode_plantuml_hex",
    "parse",
]

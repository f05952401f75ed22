"""Conversion entry point: PlantUML (or C4-PlantUML) source to draw.io document."""

from typing import Optional
import logging

from puml2drawio.c4 import convert_c4_to_drawio, detect_c4
from puml2drawio.config import Configuration
from puml2drawio.generator import DrawioGenerator
from puml2drawio.parsers import parse

log = logging.getLogger(__name__)


class EmptySourceError(ValueError):
    """Raised when there is nothing to convert."""

    pass


def convert_plantuml_to_drawio(code: str, compressed: bool = False, config: Optional[Configuration] = None) -> str:
    """
    Convert PlantUML source to draw.io XML document.

    :param code: PlantUML source
    :param compressed: embed diagram as base64(deflate-raw(xml))
    :param config: configuration, defaults are used if None
    :return: <mxfile> document
    :raises EmptySourceError: if code is empty or whitespace only
    """
    trimmed = (code or "").strip()
    if not trimmed:
        raise EmptySourceError("PlantUML code is empty")

    if detect_c4(trimmed):
        log.debug("Detected C4 diagram")
        return convert_c4_to_drawio(trimmed, compressed)

    diagram = parse(trimmed)
    log.debug(f"Converting {diagram.type.value} diagram")
    return DrawioGenerator(diagram, config).generate(compressed)

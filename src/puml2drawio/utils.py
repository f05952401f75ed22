import json
import yaml
import logging
from pydantic import ValidationError
from pathlib import Path
from typing import List, Optional
from puml2drawio.config import Configuration, JSON


def normalize_lines(text: str) -> List[str]:
    """Split diagram source into trimmed lines.

    Empty lines and single quote comments are dropped.

    :param text: diagram source
    :return: list of lines
    """
    lines = []
    for line in text.split("\n"):
        line = line.strip()
        if not line or line.startswith("'"):
            continue
        lines.append(line)
    return lines


def escape_xml(value: Optional[str]) -> str:
    """Escape text for use in XML attribute values.

    :param value: text, None is treated as empty
    :return: escaped text
    """
    if not value:
        return ""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def text_width(text: str, minimum: int, per_char: int = 8, padding: int = 20) -> int:
    """Rough width of a box holding given label."""
    return max(minimum, len(text) * per_char + padding)


def load_config_file(path: str | Path) -> JSON:
    if isinstance(path, str):
        path = Path(path)
    with open(path, encoding="UTF-8") as file:
        if path.suffix in [".yaml", ".yml"]:
            loaded = yaml.safe_load(file)
        else:
            loaded = json.load(file)
    # Empty YAML document is a valid, all-defaults configuration
    return loaded if loaded is not None else {}


def load_config(file_name: str | Path) -> Configuration:
    try:
        return Configuration().model_validate(load_config_file(file_name))
    except ValidationError as error:
        raise ValueError("Error parsing configuration file") from error


class LogFormatter(logging.Formatter):
    _grey = "\x1b[38;21m"
    _green = "\x1b[32m"
    _red = "\x1b[31;21m"
    _bold_red = "\x1b[31;1m"
    _yellow = "\u001b[33m"
    _blue = "\u001b[34m"
    _white = "\u001b[37m"
    _reset = "\x1b[0m"
    _bold = "\u001b[1m"
    _prefix = (
        _green
        + "%(asctime)s  "
        + _reset
        + _blue
        + "%(name)s "
        + _reset
        + _white
        + "%(funcName)s "
        + _reset
        + _bold
        + _grey
        + "%(levelname)s "
        + _reset
    )
    _message = "%(message)s"
    _formats = {
        logging.DEBUG: _prefix + _grey + _message + _reset,
        logging.INFO: _prefix + _white + _message + _reset,
        logging.WARNING: _prefix + _yellow + _message + _reset,
        logging.ERROR: _prefix + _red + _message + _reset,
        logging.CRITICAL: _prefix + _bold_red + _message + _reset,
    }

    def format(self, record):
        log_fmt = self._formats.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)

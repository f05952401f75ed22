from puml2drawio.utils import (
    escape_xml,
    load_config,
    normalize_lines,
    text_width,
    LogFormatter,
)
from pathlib import Path
import logging
import pytest


def test_load_json() -> None:
    path = Path(__file__).parent / "data" / "config.json"
    config = load_config(path)
    assert config.compressed is True
    assert config.plantuml_server == "http://localhost:10005"
    assert config.mermaid_format == "svg"


def test_load_yaml() -> None:
    path = Path(__file__).parent / "data" / "config.yaml"
    config = load_config(path)
    assert config.plantuml_theme == "sketchy"
    assert config.mermaid_server == "kroki"
    assert config.request_timeout == 5


def test_load_empty_yaml() -> None:
    config = load_config(str(Path(__file__).parent / "data" / "empty.yaml"))
    assert config.compressed is False


def test_load_file_does_not_exist() -> None:
    path = "not_exists"
    with pytest.raises(FileNotFoundError):
        load_config(path)


def test_load_file_wrong_data() -> None:
    path = Path(__file__).parent / "data" / "wrong.yaml"
    with pytest.raises(ValueError):
        load_config(path)


def test_normalize_lines() -> None:
    text = "@startuml\n  class A  \n\n' comment\n\tA --> B\n@enduml"
    assert normalize_lines(text) == ["@startuml", "class A", "A --> B", "@enduml"]


@pytest.mark.parametrize(
    "value,expected",
    [
        ("", ""),
        (None, ""),
        ("plain", "plain"),
        ("a & b", "a &amp; b"),
        ("<tag>", "&lt;tag&gt;"),
        ("\"it's\"", "&quot;it&apos;s&quot;"),
        ("&lt;", "&amp;lt;"),
    ],
)
def test_escape_xml(value, expected) -> None:
    assert escape_xml(value) == expected


@pytest.mark.parametrize(
    "text,minimum,expected",
    [
        ("", 140, 140),
        ("short", 140, 140),
        ("a much longer label here", 140, 212),
    ],
)
def test_text_width(text, minimum, expected) -> None:
    assert text_width(text, minimum) == expected


def test_log_formatter() -> None:
    record = logging.LogRecord("puml2drawio", logging.WARNING, __file__, 1, "hello", None, None)
    assert "hello" in LogFormatter().format(record)

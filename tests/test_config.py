"""Tests for config.py - Configuration validation."""

import pytest
from pydantic import ValidationError
from puml2drawio.config import Configuration


def test_defaults() -> None:
    config = Configuration()
    assert config.compressed is False
    assert config.plantuml_server == "https://www.plantuml.com/plantuml"
    assert config.plantuml_format == "svg"
    assert config.plantuml_theme is None
    assert config.mermaid_server == "mermaid"
    assert config.request_timeout == 30


def test_extra_fields_forbidden() -> None:
    with pytest.raises(ValidationError):
        Configuration(database_url="sqlite://")


def test_assignment_validated() -> None:
    config = Configuration()
    with pytest.raises(ValidationError):
        config.mermaid_server = "elsewhere"


def test_format_values() -> None:
    with pytest.raises(ValidationError):
        Configuration(plantuml_format="gif")

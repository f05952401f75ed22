"""Stuff related to application configuration."""

from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional, TypeAlias

#: General JSON type
JSON: TypeAlias = dict[str, "JSON"] | list["JSON"] | str | int | float | bool | None


class Configuration(BaseModel):
    """Options for conversion and image-service URLs.

    Everything has a default, so an empty configuration file is valid. Parsing
    itself is not configurable, it always follows the PlantUML heuristics.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    #: Embed diagram body as base64(deflate-raw(...)) instead of plain XML.
    compressed: bool = False
    #: Base URL of the PlantUML image service.
    plantuml_server: str = "https://www.plantuml.com/plantuml"
    #: Output format requested from PlantUML service.
    plantuml_format: Literal["svg", "png", "txt", "uml"] = "svg"
    #: Optional theme injected as "!theme" directive.
    plantuml_theme: Optional[str] = None
    #: Which service renders Mermaid images.
    mermaid_server: Literal["mermaid", "kroki"] = "mermaid"
    #: Override of Mermaid service base URL, None uses the service default.
    mermaid_base_url: Optional[str] = None
    #: Output format requested from Mermaid service.
    mermaid_format: Literal["png", "svg"] = "png"
    #: Timeout (seconds) used when downloading rendered images.
    request_timeout: int = 30

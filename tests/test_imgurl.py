"""Tests for imgurl.py - PlantUML and Mermaid image service URLs."""

import base64
import json
import zlib
import pytest
from puml2drawio.imgurl import (
    PLANTUML_ALPHABET,
    PLANTUML_THEMES,
    apply_theme,
    build_mermaid_img_url,
    encode_mermaid,
    encode_plantuml,
    encode_plantuml_hex,
    plantuml_base64,
)


def plantuml_decode(encoded: str) -> str:
    """Decode PlantUML URL data back to source text."""
    data = bytearray()
    for i in range(0, len(encoded), 4):
        bits = 0
        for char in encoded[i : i + 4]:
            bits = (bits << 6) | PLANTUML_ALPHABET.index(char)
        data += bytes([(bits >> 16) & 0xFF, (bits >> 8) & 0xFF, bits & 0xFF])
    return zlib.decompressobj(-15).decompress(bytes(data)).decode("utf-8")


def mermaid_decode(encoded: str) -> dict:
    """Decode Mermaid URL data back to JSON payload."""
    padded = encoded + "=" * (-len(encoded) % 4)
    return json.loads(zlib.decompress(base64.urlsafe_b64decode(padded)).decode("utf-8"))


class TestPlantUML:
    SOURCE = "@startuml\nAlice -> Bob : hello\n@enduml"

    def test_url_shape(self):
        url = encode_plantuml(self.SOURCE)
        prefix = "https://www.plantuml.com/plantuml/svg/"
        assert url.startswith(prefix)
        assert all(char in PLANTUML_ALPHABET for char in url[len(prefix) :])

    def test_decodes_back(self):
        url = encode_plantuml(self.SOURCE, format="png", server="http://localhost:8080/")
        assert url.startswith("http://localhost:8080/png/")
        assert plantuml_decode(url.rsplit("/", 1)[1]) == self.SOURCE

    def test_theme_in_payload(self):
        url = encode_plantuml(self.SOURCE, theme="sketchy")
        assert plantuml_decode(url.rsplit("/", 1)[1]) == "@startuml\n!theme sketchy\nAlice -> Bob : hello\n@enduml"

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            encode_plantuml(self.SOURCE, format="gif")

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"\x00\x00\x00", "0000"),
            (b"\xff", "_m00"),
            (b"\xff\xff\xff", "____"),
        ],
    )
    def test_alphabet_encoding(self, data, expected):
        assert plantuml_base64(data) == expected

    def test_output_length(self):
        assert len(plantuml_base64(b"abcd")) == 8

    def test_apply_theme_wraps_bare_text(self):
        assert apply_theme("A -> B", "toy") == "@startuml\n!theme toy\nA -> B\n@enduml"

    def test_apply_theme_only_first_start(self):
        text = "@startuml\nA\n@enduml\n@startuml\nB\n@enduml"
        assert apply_theme(text, "toy").count("!theme") == 1

    def test_hex(self):
        assert encode_plantuml_hex("Ab") == "~h4162"

    def test_themes(self):
        assert len(PLANTUML_THEMES) == 39
        assert "sketchy-outline" in PLANTUML_THEMES


class TestMermaid:
    def test_payload(self):
        encoded = encode_mermaid("  graph TD\nA-->B  ")
        assert mermaid_decode(encoded) == {"code": "graph TD\nA-->B", "mermaid": {"theme": "default"}}

    def test_url_safe(self):
        encoded = encode_mermaid("graph TD\n" + "\n".join(f"N{i}-->N{i + 1}" for i in range(50)))
        assert not set(encoded) & {"+", "/", "="}

    def test_zlib_header(self):
        encoded = encode_mermaid("graph TD\nA-->B")
        data = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
        assert data[0] == 0x78

    def test_mermaid_ink(self):
        url = build_mermaid_img_url("graph TD\nA-->B")
        assert url.startswith("https://mermaid.ink/img/pako:")
        assert url.endswith("?type=png")

    def test_mermaid_ink_size(self):
        url = build_mermaid_img_url("graph TD\nA-->B", format="svg", width=100, height=50)
        assert url.endswith("?type=svg&width=100&height=50")

    def test_kroki(self):
        encoded = encode_mermaid("graph TD\nA-->B")
        assert build_mermaid_img_url("graph TD\nA-->B", server="kroki") == f"https://kroki.io/mermaid/png/{encoded}"
        url = build_mermaid_img_url("graph TD\nA-->B", server="kroki", base_url="http://kroki.local/", height=50)
        assert url == f"http://kroki.local/mermaid/png/{encoded}?height=50"

    @pytest.mark.parametrize("kwargs", [{"format": "gif"}, {"server": "other"}])
    def test_invalid_options(self, kwargs):
        with pytest.raises(ValueError):
            build_mermaid_img_url("graph TD", **kwargs)

"""
Tests for the YAML front matter codec.
"""
import pytest

from core.exceptions import MetadataDecodeError
from infra.utils.front_matter import decode, encode


class TestEncodeDecode:

    def test_round_trip_preserves_metadata_and_body(self):
        meta = {"chapter": 1, "scene": 2, "characters": ["Marie Dubois", "Théo"], "location": "Bibliothèque", "mood": "calm"}
        body = "First line.\n\nSecond paragraph.\n"
        assert decode(encode(body, meta)) == (meta, body)

    def test_round_trip_without_trailing_newline(self):
        meta = {"chapter": 3}
        assert decode(encode("A.", meta)) == (meta, "A.")

    def test_round_trip_empty_body_and_metadata(self):
        assert decode(encode("", {})) == ({}, "")

    def test_body_containing_separator_line_survives(self):
        body = "Before\n---\nAfter"
        assert decode(encode(body, {"mood": "tense"})) == ({"mood": "tense"}, body)

    def test_encoded_blob_layout(self):
        blob = encode("Hello", {"chapter": 1})
        assert blob == "---\nchapter: 1\n---\nHello"


class TestDecode:

    def test_text_without_header_is_all_body(self):
        assert decode("Just prose.") == ({}, "Just prose.")

    def test_horizontal_rule_is_not_a_header(self):
        assert decode("----\nprose") == ({}, "----\nprose")

    def test_empty_header(self):
        assert decode("---\n---\nBody") == ({}, "Body")

    def test_crlf_line_endings(self):
        assert decode("---\r\nchapter: 1\r\n---\r\nBody") == ({"chapter": 1}, "Body")

    def test_unterminated_header_fails(self):
        with pytest.raises(MetadataDecodeError) as exc_info:
            decode("---\nchapter: 1\nBody", source="scenes/ch01-scene01")
        assert "scenes/ch01-scene01" in str(exc_info.value)

    def test_invalid_yaml_fails(self):
        with pytest.raises(MetadataDecodeError):
            decode("---\ncharacters: [unclosed\n---\nBody")

    def test_non_mapping_header_fails(self):
        with pytest.raises(MetadataDecodeError):
            decode("---\n- a\n- b\n---\nBody")

    def test_yes_no_words_stay_strings(self):
        meta, _ = decode("---\ncharacters: [Marco, No, yes, Off, y]\n---\nBody")
        assert meta == {"characters": ["Marco", "No", "yes", "Off", "y"]}

    def test_true_false_are_still_booleans(self):
        meta, _ = decode("---\ndraft: true\nfinal: False\n---\n")
        assert meta == {"draft": True, "final": False}

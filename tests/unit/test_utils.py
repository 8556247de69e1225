"""Unit tests for tolerant JSON extraction and key normalization."""

from craftstory.core.utils import (
    ParsedJSON,
    Unparsed,
    camel_to_snake,
    extract_json,
    normalize_keys,
    strip_code_fences,
)


class TestExtractJson:
    """Model output is parsed defensively and never raises."""

    def test_bare_object(self):
        assert extract_json('{"a": 1}') == ParsedJSON(data={"a": 1})

    def test_object_wrapped_in_prose(self):
        text = 'Here is the profile:\n{"name": "Priya"}\nLet me know if you need more.'
        assert extract_json(text) == ParsedJSON(data={"name": "Priya"})

    def test_fenced_object(self):
        assert extract_json('```json\n{"a": [1, 2]}\n```') == ParsedJSON(data={"a": [1, 2]})

    def test_first_object_when_span_is_invalid(self):
        text = 'First {"a": 1} and then {"b": 2}'
        assert extract_json(text) == ParsedJSON(data={"a": 1})

    def test_array(self):
        text = 'Questions: [{"question": "Name?"}] done'
        assert extract_json(text, kind="array") == ParsedJSON(data=[{"question": "Name?"}])

    def test_array_requested_but_only_object(self):
        result = extract_json('{"a": 1}', kind="array")
        assert isinstance(result, Unparsed)

    def test_malformed(self):
        result = extract_json('{"name": "Priya",')
        assert isinstance(result, Unparsed)
        assert result.raw == '{"name": "Priya",'

    def test_no_json(self):
        result = extract_json("I could not find anything useful.")
        assert isinstance(result, Unparsed)
        assert "no JSON" in result.reason

    def test_empty(self):
        assert extract_json("") == Unparsed(raw="", reason="empty output")
        assert extract_json(None) == Unparsed(raw="", reason="empty output")


class TestHelpers:
    def test_strip_code_fences(self):
        assert strip_code_fences("```\nhello\n```") == "hello"
        assert strip_code_fences("  plain  ") == "plain"

    def test_camel_to_snake(self):
        assert camel_to_snake("craftType") == "craft_type"
        assert camel_to_snake("experienceYears") == "experience_years"
        assert camel_to_snake("name") == "name"

    def test_normalize_keys(self):
        assert normalize_keys({"culturalBackground": "x", "bio": "y"}) == {
            "cultural_background": "x",
            "bio": "y",
        }

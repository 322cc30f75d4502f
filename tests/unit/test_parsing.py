"""Unit tests for JSON extraction from LLM responses."""

import pytest

from easycert.llm.client import LLMError
from easycert.llm.parsing import ResponseParseError, extract_json_array, strip_code_fences


class TestStripCodeFences:
    """Tests for strip_code_fences()."""

    def test_json_fence(self) -> None:
        """Test a ```json fence is removed."""
        assert strip_code_fences('```json\n[{"a": 1}]\n```') == '[{"a": 1}]'

    def test_uppercase_label(self) -> None:
        """Test the json label is matched case-insensitively."""
        assert strip_code_fences("```JSON\n[]\n```") == "[]"

    def test_bare_fence(self) -> None:
        """Test an unlabeled fence is removed."""
        assert strip_code_fences("```\n[1, 2]\n```") == "[1, 2]"

    def test_single_line_bare_fence(self) -> None:
        """Test a fence without newlines keeps its content."""
        assert strip_code_fences("```[1, 2]```") == "[1, 2]"

    def test_surrounding_prose(self) -> None:
        """Test text around the fence is ignored."""
        text = "Aquí tienes:\n```json\n[]\n```\nEspero que ayude."
        assert strip_code_fences(text) == "[]"

    def test_unterminated_fence(self) -> None:
        """Test a truncated response without closing fence still yields content."""
        assert strip_code_fences('```json\n[{"a": 1}]') == '[{"a": 1}]'

    def test_no_fence(self) -> None:
        """Test plain text is only stripped."""
        assert strip_code_fences("  [1]\n") == "[1]"


class TestExtractJsonArray:
    """Tests for extract_json_array()."""

    def test_plain_array(self) -> None:
        """Test an unfenced array parses."""
        assert extract_json_array('[{"asset": "X"}]') == [{"asset": "X"}]

    def test_fenced_array(self) -> None:
        """Test a fenced array parses."""
        assert extract_json_array('```json\n[{"asset":"X"}]\n```') == [{"asset": "X"}]

    def test_items_not_validated(self) -> None:
        """Test array items of any type are returned as-is."""
        assert extract_json_array('[1, "two", null]') == [1, "two", None]

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_response(self, text: str | None) -> None:
        """Test empty responses raise."""
        with pytest.raises(ResponseParseError, match="Empty response"):
            extract_json_array(text)

    def test_invalid_json(self) -> None:
        """Test malformed JSON raises and keeps the raw text."""
        with pytest.raises(ResponseParseError) as exc_info:
            extract_json_array("not json at all")
        assert exc_info.value.response_text == "not json at all"

    def test_object_is_not_array(self) -> None:
        """Test a JSON object raises."""
        with pytest.raises(ResponseParseError, match="Expected a JSON array, got dict"):
            extract_json_array('{"scenarios": []}')

    def test_parse_error_is_llm_error(self) -> None:
        """Test callers catching LLMError also catch parse failures."""
        assert issubclass(ResponseParseError, LLMError)

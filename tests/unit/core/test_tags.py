"""Unit tests for tag, reasoning and answer extraction."""

import pytest

from omnidecode.core.config import SEED_THINK_TAG
from omnidecode.core.tags import coerce_text, extract_answer, extract_reasoning, extract_tag


class TestExtractTag:
    """Test generic tag extraction."""

    def test_extracts_and_trims(self):
        """Test basic extraction with surrounding whitespace."""
        assert extract_tag("<answer> Paris </answer>", "answer") == "Paris"

    def test_multiline_content(self):
        """Test that inner newlines are preserved."""
        text = "<think>\nstep one\nstep two\n</think>"

        assert extract_tag(text, "think") == "step one\nstep two"

    def test_missing_tag_returns_empty(self):
        """Test that an absent tag yields the empty string."""
        assert extract_tag("no tags here", "answer") == ""

    def test_non_greedy(self):
        """Test that extraction stops at the first close tag."""
        text = "<answer>first</answer> junk <answer>second</answer>"

        assert extract_tag(text, "answer") == "first"

    @pytest.mark.parametrize("value", [None, 42, 3.5, ["<answer>x</answer>"]])
    def test_non_string_input_never_raises(self, value):
        """Test that non-string input is tolerated."""
        assert isinstance(extract_tag(value, "answer"), str)

    def test_none_coerces_to_empty(self):
        """Test that None becomes the empty string."""
        assert coerce_text(None) == ""


class TestReasoningAndAnswer:
    """Test reasoning and answer helpers."""

    def test_reasoning_default_tag(self):
        """Test reasoning extraction with the default tag."""
        assert extract_reasoning("<think>hmm</think><answer>ok</answer>") == "hmm"

    def test_answer(self):
        """Test answer extraction."""
        assert extract_answer("<think>hmm</think><answer>ok</answer>") == "ok"

    def test_custom_think_tag(self):
        """Test reasoning extraction with a model-specific tag."""
        text = f"<{SEED_THINK_TAG}>deliberation</{SEED_THINK_TAG}>"

        assert extract_reasoning(text, SEED_THINK_TAG) == "deliberation"
        assert extract_reasoning(text) == ""

    def test_both_optional(self):
        """Test that reasoning and answer are independent."""
        text = "<answer>only answer</answer>"

        assert extract_reasoning(text) == ""
        assert extract_answer(text) == "only answer"

    def test_reasoning_extraction_is_idempotent(self):
        """Test that re-extracting already extracted reasoning returns it unchanged."""
        text = "<think>\n  Look at the screen, then click OK.  \n</think>"
        reasoning = extract_reasoning(text)

        assert extract_reasoning(f"<think>{reasoning}</think>") == reasoning
        assert reasoning.strip() == reasoning

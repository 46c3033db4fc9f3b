"""Unit tests for DecoderConfig and the custom exceptions."""

import pytest

from omnidecode.core.config import DecoderConfig, IdStrategy, SEED_THINK_TAG
from omnidecode.core.exceptions import ConfigurationError, PayloadDecodeError


class TestDecoderConfig:
    """Test configuration defaults and validation."""

    def test_defaults(self):
        """Test default tag names, sentinels and id settings."""
        config = DecoderConfig()

        assert config.think_tag == "think"
        assert config.answer_tag == "answer"
        assert config.code_env_tag == "code_env"
        assert config.tool_env_tag == "mcp_env"
        assert config.pointer_env_tag == "computer_env"
        assert config.call_begin_sentinel == "<|FunctionCallBegin|>"
        assert config.call_end_sentinel == "<|FunctionCallEnd|>"
        assert config.id_prefix == "call"
        assert config.id_suffix_length == 9
        assert config.id_strategy is IdStrategy.RANDOM

    def test_seed_think_tag(self):
        """Test configuring the model-specific reasoning tag."""
        assert DecoderConfig(think_tag=SEED_THINK_TAG).think_tag == SEED_THINK_TAG

    @pytest.mark.parametrize("tag", ["", "bad tag", "<think>", "1abc"])
    def test_invalid_tag_names(self, tag):
        """Test that malformed tag names are rejected."""
        with pytest.raises(ConfigurationError):
            DecoderConfig(think_tag=tag)

    def test_invalid_sentinel(self):
        """Test that sentinels must use the <|Name|> form."""
        with pytest.raises(ConfigurationError) as exc_info:
            DecoderConfig(call_begin_sentinel="[BEGIN]")

        assert exc_info.value.field == "call_begin_sentinel"

    def test_direct_construction_reports_field(self):
        """Test that keyword construction raises ConfigurationError like from_dict."""
        with pytest.raises(ConfigurationError) as exc_info:
            DecoderConfig(think_tag="bad tag")

        assert exc_info.value.field == "think_tag"
        assert exc_info.value.value == "bad tag"
        assert isinstance(exc_info.value, ValueError)

    def test_direct_construction_identical_sentinels(self):
        """Test that the sentinel pair check also applies to keyword construction."""
        with pytest.raises(ConfigurationError, match="must differ"):
            DecoderConfig(call_begin_sentinel="<|X|>", call_end_sentinel="<|X|>")

    def test_from_dict(self):
        """Test building from a plain dictionary."""
        config = DecoderConfig.from_dict({"id_strategy": "sequential", "answer_tag": "final"})

        assert config.id_strategy is IdStrategy.SEQUENTIAL
        assert config.answer_tag == "final"

    def test_from_dict_reports_field(self):
        """Test that validation errors become ConfigurationError with the field name."""
        with pytest.raises(ConfigurationError) as exc_info:
            DecoderConfig.from_dict({"think_tag": "bad tag"})

        assert exc_info.value.field == "think_tag"
        assert exc_info.value.value == "bad tag"

    def test_from_dict_identical_sentinels(self):
        """Test that begin and end sentinels must differ."""
        with pytest.raises(ConfigurationError):
            DecoderConfig.from_dict({
                "call_begin_sentinel": "<|X|>",
                "call_end_sentinel": "<|X|>",
            })

    def test_suffix_length_bounds(self):
        """Test that the suffix length is bounded."""
        with pytest.raises(ConfigurationError):
            DecoderConfig.from_dict({"id_suffix_length": 2})


class TestExceptions:
    """Test exception context helpers."""

    def test_payload_decode_error_context(self):
        """Test PayloadDecodeError string and context."""
        original = ValueError("bad")
        error = PayloadDecodeError("cannot parse", payload="[1,", original_error=original)

        assert "Payload Decode Failed: cannot parse" in str(error)
        assert "ValueError: bad" in str(error)

        context = error.get_full_context()
        assert context["error_type"] == "PayloadDecodeError"
        assert context["payload"] == "[1,"
        assert context["original_error"] == {"type": "ValueError", "message": "bad"}

    def test_payload_decode_error_without_original(self):
        """Test context when there is no underlying exception."""
        context = PayloadDecodeError("x").get_full_context()

        assert context["original_error"] == {"type": None, "message": None}

    def test_configuration_error_is_value_error(self):
        """Test that ConfigurationError can be caught as ValueError."""
        error = ConfigurationError("nope", field="environment", value="bogus")

        assert isinstance(error, ValueError)
        assert "Field: environment" in str(error)
        assert error.get_full_context()["value"] == "bogus"

"""Unit tests for the tool environment decoder."""

import json

import pytest

from omnidecode.core.config import DecoderConfig
from omnidecode.core.exceptions import PayloadDecodeError
from omnidecode.core.models import RawCall
from omnidecode.decoders.tool_decoder import ToolDecoder, parse_call_payload, sentinel_name


def wrap(payload: str) -> str:
    """Wrap a payload in the default tool environment markup."""
    return f"<mcp_env>\n<|FunctionCallBegin|>{payload}<|FunctionCallEnd|>\n</mcp_env>"


class TestToolDecoder:
    """Test decoding of <mcp_env> regions."""

    @pytest.fixture
    def decoder(self):
        """Create a ToolDecoder with default configuration."""
        return ToolDecoder()

    def test_multiple_calls_in_order(self, decoder):
        """Test that every valid descriptor is decoded in array order."""
        payload = json.dumps([
            {"name": "search", "parameters": {"query": "weather"}},
            {"name": "fetch", "parameters": {"url": "https://example.com", "timeout": 10}},
        ])

        outcome = decoder.decode(wrap(payload))

        assert outcome.calls == [
            RawCall("search", {"query": "weather"}),
            RawCall("fetch", {"url": "https://example.com", "timeout": 10}),
        ]
        assert outcome.diagnostics == []

    def test_partial_success(self, decoder):
        """Test that a descriptor missing parameters is dropped on its own."""
        payload = '[{"name": "good", "parameters": {"a": 1}}, {"name": "bad"}]'

        outcome = decoder.decode(wrap(payload))

        assert outcome.calls == [RawCall("good", {"a": 1})]
        assert [diagnostic.kind for diagnostic in outcome.diagnostics] == ["dropped_entry"]
        assert outcome.diagnostics[0].detail["index"] == 1

    def test_malformed_payload(self, decoder):
        """Test that unparsable structure yields no calls and does not raise."""
        outcome = decoder.decode(wrap('[{"name": "a", "parameters": {]'))

        assert outcome.calls == []
        assert [diagnostic.kind for diagnostic in outcome.diagnostics] == ["malformed_payload"]
        assert outcome.diagnostics[0].environment == "tool"

    def test_deeply_nested_payload(self, decoder):
        """Test that a payload nested past the recursion limit is reported as malformed."""
        outcome = decoder.decode(wrap("[" * 100000))

        assert outcome.calls == []
        assert [diagnostic.kind for diagnostic in outcome.diagnostics] == ["malformed_payload"]
        assert outcome.diagnostics[0].detail["error"]["original_error"]["type"] == "RecursionError"

    def test_name_kept_verbatim(self, decoder):
        """Test that the tool name is passed through exactly as written."""
        outcome = decoder.decode(wrap('[{"name": " x ", "parameters": {}}]'))

        assert outcome.calls == [RawCall(" x ", {})]

    def test_non_array_payload(self, decoder):
        """Test that a scalar payload is treated as malformed."""
        outcome = decoder.decode(wrap("42"))

        assert outcome.calls == []
        assert outcome.diagnostics[0].kind == "malformed_payload"

    def test_missing_sentinels(self, decoder):
        """Test that a region without sentinels yields nothing."""
        outcome = decoder.decode('<mcp_env>[{"name": "a", "parameters": {}}]</mcp_env>')

        assert outcome.calls == []
        assert outcome.diagnostics == []

    def test_missing_end_sentinel(self, decoder):
        """Test that an unterminated payload yields nothing."""
        outcome = decoder.decode('<mcp_env><|FunctionCallBegin|>[{"name": "a", "parameters": {}}]</mcp_env>')

        assert outcome.calls == []

    def test_empty_payload(self, decoder):
        """Test that empty content between sentinels yields nothing."""
        outcome = decoder.decode(wrap("   "))

        assert outcome.calls == []
        assert outcome.diagnostics == []

    def test_missing_region(self, decoder):
        """Test that sentinels outside the region are ignored."""
        text = '<|FunctionCallBegin|>[{"name": "a", "parameters": {}}]<|FunctionCallEnd|>'

        assert decoder.decode(text).calls == []

    def test_empty_parameters_object_is_present(self, decoder):
        """Test that an empty parameters object still counts as present."""
        outcome = decoder.decode(wrap('[{"name": "list_tools", "parameters": {}}]'))

        assert outcome.calls == [RawCall("list_tools", {})]

    @pytest.mark.parametrize("descriptor", [
        '{"name": "", "parameters": {}}',
        '{"name": null, "parameters": {}}',
        '{"parameters": {"a": 1}}',
        '{"name": "x", "parameters": null}',
        '{"name": "x", "parameters": [1, 2]}',
        '"just a string"',
        '7',
    ])
    def test_invalid_descriptors_dropped(self, decoder, descriptor):
        """Test that each kind of invalid descriptor is dropped while siblings survive."""
        payload = f'[{descriptor}, {{"name": "ok", "parameters": {{"k": "v"}}}}]'

        outcome = decoder.decode(wrap(payload))

        assert outcome.calls == [RawCall("ok", {"k": "v"})]
        assert len(outcome.diagnostics) == 1

    def test_stringified_parameters(self, decoder):
        """Test that parameters serialised as a JSON string are decoded."""
        payload = json.dumps([{"name": "search", "parameters": json.dumps({"q": "x"})}])

        assert decoder.decode(wrap(payload)).calls == [RawCall("search", {"q": "x"})]

    def test_single_object_payload(self, decoder):
        """Test that a bare descriptor object is accepted."""
        outcome = decoder.decode(wrap('{"name": "solo", "parameters": {"n": 1}}'))

        assert outcome.calls == [RawCall("solo", {"n": 1})]

    def test_nested_values_preserved(self, decoder):
        """Test that nested structures keep their types and key order."""
        parameters = {"z": [1, 2, {"deep": True}], "a": None, "m": 1.5}
        payload = json.dumps([{"name": "f", "parameters": parameters}])

        call = decoder.decode(wrap(payload)).calls[0]

        assert call.arguments == parameters
        assert list(call.arguments) == ["z", "a", "m"]

    def test_custom_sentinels(self):
        """Test configured sentinel markers."""
        config = DecoderConfig(call_begin_sentinel="<|tool_calls|>", call_end_sentinel="<|/tool_calls|>")
        decoder = ToolDecoder(config)
        text = '<mcp_env><|tool_calls|>[{"name": "a", "parameters": {}}]<|/tool_calls|></mcp_env>'

        assert decoder.decode(text).calls == [RawCall("a", {})]


class TestPayloadHelpers:
    """Test payload parsing helpers."""

    def test_parse_call_payload_list(self):
        """Test that a JSON array is returned as-is."""
        assert parse_call_payload('[{"name": "a"}]') == [{"name": "a"}]

    def test_parse_call_payload_invalid_json(self):
        """Test that invalid JSON raises PayloadDecodeError with the cause."""
        with pytest.raises(PayloadDecodeError) as exc_info:
            parse_call_payload("[{")

        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)
        assert exc_info.value.payload == "[{"

    def test_parse_call_payload_too_deep(self):
        """Test that runaway nesting raises PayloadDecodeError instead of RecursionError."""
        with pytest.raises(PayloadDecodeError, match="nested too deeply") as exc_info:
            parse_call_payload("[" * 100000)

        assert isinstance(exc_info.value.original_error, RecursionError)

    def test_parse_call_payload_wrong_type(self):
        """Test that a non-array top-level value raises."""
        with pytest.raises(PayloadDecodeError, match="must be an array"):
            parse_call_payload('"text"')

    def test_sentinel_name(self):
        """Test stripping sentinel delimiters."""
        assert sentinel_name("<|FunctionCallBegin|>") == "FunctionCallBegin"

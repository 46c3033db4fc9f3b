"""Tool environment decoder.

Decodes the external tool invocation grammar::

    <mcp_env>
    <|FunctionCallBegin|>[
      {"name": "search", "parameters": {"query": "weather"}},
      {"name": "fetch", "parameters": {"url": "https://example.com"}}
    ]<|FunctionCallEnd|>
    </mcp_env>

Decoding is partial-success: a descriptor missing its name or parameters is
dropped on its own, while an unparsable payload drops the whole batch. In
both cases a diagnostic is recorded and nothing is raised.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from omnidecode.core.exceptions import PayloadDecodeError
from omnidecode.core.models import RawCall
from omnidecode.core.tokenizer import Region, TagScanner, TokenKind
from omnidecode.decoders.base import BaseDecoder, DecodeOutcome, Environment


logger = logging.getLogger(__name__)


def sentinel_name(sentinel: str) -> str:
    """Strip the ``<|`` and ``|>`` delimiters from a sentinel marker."""
    return sentinel[2:-2]


def parse_call_payload(payload: str) -> List[Any]:
    """Parse the text between the sentinels into a list of descriptors.

    A single bare descriptor object is accepted as a one-element list.

    Args:
        payload: Raw payload text.

    Returns:
        The parsed descriptors. Items are not validated.

    Raises:
        PayloadDecodeError: If the payload is not a JSON array or object.
    """
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        raise PayloadDecodeError("Tool call payload is not valid JSON", payload=payload, original_error=e) from e
    except RecursionError as e:
        raise PayloadDecodeError("Tool call payload is nested too deeply", payload=payload, original_error=e) from e

    if isinstance(parsed, dict):
        logger.debug("Payload is a single descriptor object, wrapping in a list")
        return [parsed]

    if not isinstance(parsed, list):
        raise PayloadDecodeError(
            f"Tool call payload must be an array, got {type(parsed).__name__}",
            payload=payload
        )

    return parsed


def _coerce_parameters(parameters: Any) -> Optional[Dict[str, Any]]:
    if isinstance(parameters, dict):
        return parameters

    # Some models serialise the parameters object a second time.
    if isinstance(parameters, str):
        try:
            decoded = json.loads(parameters)
        except (json.JSONDecodeError, RecursionError):
            return None
        if isinstance(decoded, dict):
            return decoded

    return None


class ToolDecoder(BaseDecoder):
    """Decoder for ``<mcp_env>`` regions carrying a sentinel-delimited call array."""

    environment = Environment.TOOL

    @property
    def region_tag(self) -> str:
        return self.config.tool_env_tag

    def _decode_region(self, scanner: TagScanner, region: Region, outcome: DecodeOutcome) -> None:
        payload = self._find_payload(scanner, region)
        if not payload:
            logger.debug("No tool call payload between sentinels")
            return

        try:
            descriptors = parse_call_payload(payload)
        except PayloadDecodeError as e:
            logger.debug(str(e))
            self._note(outcome, "malformed_payload", f"Failed to parse tool call data: {e.message}",
                       error=e.get_full_context())
            return

        for index, descriptor in enumerate(descriptors):
            call = self._to_call(descriptor)
            if call is None:
                self._note(outcome, "dropped_entry", f"Dropped tool call descriptor #{index}",
                           index=index, descriptor=descriptor)
                continue
            outcome.calls.append(call)

    def _find_payload(self, scanner: TagScanner, region: Region) -> str:
        begin = sentinel_name(self.config.call_begin_sentinel)
        end = sentinel_name(self.config.call_end_sentinel)
        payload_start: Optional[int] = None

        for token in scanner.iter_tokens(region.start, region.end):
            if token.kind is not TokenKind.SENTINEL:
                continue
            if payload_start is None:
                if token.name == begin:
                    payload_start = token.end
            elif token.name == end:
                return scanner.text[payload_start:token.start].strip()

        return ""

    @staticmethod
    def _to_call(descriptor: Any) -> Optional[RawCall]:
        if not isinstance(descriptor, dict):
            return None

        name = descriptor.get("name")
        if not isinstance(name, str) or not name.strip():
            return None

        parameters = _coerce_parameters(descriptor.get("parameters"))
        if parameters is None:
            return None

        return RawCall(name, parameters)

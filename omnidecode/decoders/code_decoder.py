"""Code environment decoder.

Decodes the shell/file/code execution grammar::

    <code_env>
    <function=execute_bash>
    <parameter=command>ls -la</parameter>
    </code_env>

The closing ``</parameter>`` and ``</function>`` markers are optional; a
parameter value runs until the next function or parameter marker, or the end
of the region.
"""

import logging
from typing import Dict, List, Optional

from omnidecode.core.models import RawCall
from omnidecode.core.tokenizer import Region, TagScanner, Token, TokenKind
from omnidecode.decoders.base import BaseDecoder, DecodeOutcome, Environment


logger = logging.getLogger(__name__)


FUNCTION_MARKER = "function"
PARAMETER_MARKER = "parameter"
_MARKERS = (FUNCTION_MARKER, PARAMETER_MARKER)


def _is_marker(token: Token) -> bool:
    return token.kind in (TokenKind.OPEN, TokenKind.CLOSE) and token.name in _MARKERS


class CodeDecoder(BaseDecoder):
    """Decoder for ``<code_env>`` regions.

    Emits exactly one call when a ``<function=NAME>`` marker is present and
    none otherwise. Parameters keep first-seen order; a repeated key keeps its
    original position but takes the later value.
    """

    environment = Environment.CODE

    @property
    def region_tag(self) -> str:
        return self.config.code_env_tag

    def _decode_region(self, scanner: TagScanner, region: Region, outcome: DecodeOutcome) -> None:
        markers: List[Token] = [
            token for token in scanner.iter_tokens(region.start, region.end) if _is_marker(token)
        ]

        function_index = self._find_function(markers)
        if function_index is None:
            self._note(outcome, "missing_function", "Code environment has no function marker",
                       region=scanner.slice(region).strip())
            return

        name = markers[function_index].value
        arguments: Dict[str, str] = {}

        following = markers[function_index + 1:]
        for position, marker in enumerate(following):
            if marker.kind is not TokenKind.OPEN or marker.name != PARAMETER_MARKER or not marker.value:
                continue

            value_end = following[position + 1].start if position + 1 < len(following) else region.end
            arguments[marker.value] = scanner.text[marker.end:value_end].strip()
            logger.debug(f"Parameter {marker.value!r} captured ({value_end - marker.end} chars)")

        outcome.calls.append(RawCall(name, arguments))

    @staticmethod
    def _find_function(markers: List[Token]) -> Optional[int]:
        for index, marker in enumerate(markers):
            if marker.kind is TokenKind.OPEN and marker.name == FUNCTION_MARKER and marker.value:
                return index
        return None

"""Pointer environment decoder.

Decodes the GUI action grammar::

    <computer_env>
    Action: click(point='<point>100 200</point>')
    </computer_env>

Arguments are ``key=value`` pairs separated by commas. Values written as
``'<point>X Y</point>'`` become ``Point`` mappings; every other value has its
surrounding quotes removed and stays a string.

Argument lists are read in a single forward pass, so decoding time grows
linearly with the length of the action line.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from omnidecode.core.models import Point, RawCall
from omnidecode.core.tokenizer import Region, TagScanner
from omnidecode.decoders.base import BaseDecoder, DecodeOutcome, Environment


logger = logging.getLogger(__name__)


ACTION_PATTERN = re.compile(r"Action:\s*(?P<name>\w+)\s*\(")
POINT_PATTERN = re.compile(r"^(['\"]?)\s*<point>\s*(-?\d+)[\s,]+(-?\d+)\s*</point>\s*\1$")
_QUOTES = ("'", '"')


def _closes_quote(text: str, position: int, in_call: bool) -> bool:
    # Only the whitespace run after the quote is inspected.
    length = len(text)
    while position < length and text[position].isspace():
        position += 1
    if position == length:
        return True
    return text[position] == "," or (in_call and text[position] == ")")


def scan_arguments(text: str, start: int = 0, in_call: bool = True) -> Tuple[List[str], int, bool]:
    """Read a comma separated argument list in one forward pass.

    A quote only opens right after ``=`` and only closes when followed by a
    comma, the end of the list or, inside a call, the closing parenthesis.
    Unquoted parentheses nest. Inside a call the list ends at the first
    unquoted, unnested ``)``; an unquoted newline ends it unclosed.

    Args:
        text: Source text.
        start: Offset just past the opening parenthesis.
        in_call: Whether to stop at the closing parenthesis. When False the
            whole remainder of ``text`` is one argument list.

    Returns:
        Tuple of the trimmed non-empty argument strings, the offset where
        scanning stopped, and whether a closing parenthesis was found there.

    Example:
        >>> scan_arguments("click(point='<point>1 2</point>') (done)", 6)
        (["point='<point>1 2</point>'"], 32, True)
    """
    parts: List[str] = []
    part_start = start
    quote = None
    last = ""
    depth = 0
    position = start
    length = len(text)

    while position < length:
        char = text[position]
        if quote is not None:
            if char == quote and _closes_quote(text, position + 1, in_call):
                quote = None
                last = char
        elif char in _QUOTES and last == "=":
            quote = char
            last = char
        elif char == "," and depth == 0:
            parts.append(text[part_start:position])
            part_start = position + 1
            last = ""
        elif char == "(":
            depth += 1
            last = char
        elif char == ")" and depth > 0:
            depth -= 1
            last = char
        elif in_call and char == ")":
            parts.append(text[part_start:position])
            return _clean(parts), position, True
        elif in_call and char == "\n":
            break
        elif not char.isspace():
            last = char
        position += 1

    parts.append(text[part_start:position])
    return _clean(parts), position, False


def _clean(parts: List[str]) -> List[str]:
    return [part.strip() for part in parts if part.strip()]


def split_arguments(args: str) -> List[str]:
    """Split an argument list on commas that are not inside a quoted value.

    A quote only opens right after ``=`` and only closes when followed by a
    comma or the end of the list, so ``text='it's here'`` stays one argument.

    Args:
        args: The text between the action parentheses.

    Returns:
        Non-empty, trimmed argument strings.

    Example:
        >>> split_arguments("point='<point>1 2</point>', text='a, b'")
        ["point='<point>1 2</point>'", "text='a, b'"]
    """
    parts, _, _ = scan_arguments(args, 0, in_call=False)
    return parts


def strip_quotes(value: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


class PointerDecoder(BaseDecoder):
    """Decoder for ``<computer_env>`` regions holding a single ``Action:`` line."""

    environment = Environment.POINTER

    @property
    def region_tag(self) -> str:
        return self.config.pointer_env_tag

    def _decode_region(self, scanner: TagScanner, region: Region, outcome: DecodeOutcome) -> None:
        body = scanner.slice(region).strip()

        found = self._find_action(body)
        if found is None:
            self._note(outcome, "unrecognized_grammar", "No 'Action: name(args)' line in pointer environment",
                       region=body)
            return

        name, argument_list = found
        arguments: Dict[str, Any] = {}

        for argument in argument_list:
            key, separator, raw_value = argument.partition("=")
            key = key.strip()
            if not separator or not key:
                logger.debug(f"Ignoring argument without assignment: {argument!r}")
                continue
            arguments[key] = self._parse_value(key, raw_value.strip(), outcome)

        logger.debug(f"Pointer action {name} with arguments {arguments}")
        outcome.calls.append(RawCall(name, arguments))

    @staticmethod
    def _find_action(body: str) -> Optional[Tuple[str, List[str]]]:
        """Return the name and arguments of the first action with a closed argument list."""
        scanned_to = 0
        for match in ACTION_PATTERN.finditer(body):
            if match.start() < scanned_to:
                continue
            parts, stop, closed = scan_arguments(body, match.end())
            if closed:
                return match.group("name"), parts
            logger.debug(f"Action {match.group('name')} has no closing parenthesis")
            scanned_to = stop
        return None

    def _parse_value(self, key: str, value: str, outcome: DecodeOutcome) -> Any:
        point_match = POINT_PATTERN.match(value)
        if point_match:
            return Point(x=int(point_match.group(2)), y=int(point_match.group(3)))

        if "<point>" in value:
            self._note(outcome, "malformed_point", f"Could not decode point value for {key!r}",
                       key=key, value=value)

        return strip_quotes(value)

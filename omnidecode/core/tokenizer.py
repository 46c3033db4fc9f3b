"""Shared tag tokenizer for model output.

Model output mixes free text with lightweight markup: named regions such as
``<answer>...</answer>``, valued markers such as ``<function=run>``, and
sentinels such as ``<|FunctionCallBegin|>``. This module lexes that markup
into a flat token stream once, so every environment grammar works on the
same tokens instead of running its own pattern scan over the raw text.

Anything that does not look like a tag stays plain text, so ``a < b`` or a
stray ``<`` inside code never produces a token.
"""

import logging
import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional


logger = logging.getLogger(__name__)


_TAG_PATTERN = re.compile(
    r"<\|(?P<sentinel>[^|<>\n]+)\|>"
    r"|</(?P<close>[A-Za-z_][\w.-]*)\s*>"
    r"|<(?P<open>[A-Za-z_][\w.-]*)(?:=(?P<value>[^<>\n]*))?\s*>"
)


class TokenKind(str, Enum):
    """Kinds of token produced by the tokenizer."""

    TEXT = "text"
    OPEN = "open"
    CLOSE = "close"
    SENTINEL = "sentinel"


class Token(NamedTuple):
    """A lexed span of the source text.

    Attributes:
        kind: What the span is.
        name: Tag or sentinel name, empty for text.
        value: Marker value for ``<name=value>`` tags, otherwise None.
        start: Offset of the first character in the source.
        end: Offset one past the last character in the source.
    """

    kind: TokenKind
    name: str
    value: Optional[str]
    start: int
    end: int


class Region(NamedTuple):
    """Offsets of a ``<name>...</name>`` pair.

    ``start``/``end`` bound the inner content, ``outer_start``/``outer_end``
    include the tags themselves.
    """

    name: str
    start: int
    end: int
    outer_start: int
    outer_end: int


def tokenize(text: str) -> List[Token]:
    """Lex text into a flat list of tokens.

    Args:
        text: Source text.

    Returns:
        Tokens covering the whole text in order. Adjacent text is merged into
        a single ``TEXT`` token.

    Example:
        >>> [t.kind.value for t in tokenize("<a>hi</a>")]
        ['open', 'text', 'close']
    """
    tokens: List[Token] = []
    position = 0

    for match in _TAG_PATTERN.finditer(text):
        if match.start() > position:
            tokens.append(Token(TokenKind.TEXT, "", None, position, match.start()))

        if match.group("sentinel") is not None:
            tokens.append(Token(TokenKind.SENTINEL, match.group("sentinel"), None, match.start(), match.end()))
        elif match.group("close") is not None:
            tokens.append(Token(TokenKind.CLOSE, match.group("close"), None, match.start(), match.end()))
        else:
            value = match.group("value")
            tokens.append(Token(
                TokenKind.OPEN,
                match.group("open"),
                value.strip() if value is not None else None,
                match.start(),
                match.end()
            ))
        position = match.end()

    if position < len(text):
        tokens.append(Token(TokenKind.TEXT, "", None, position, len(text)))

    return tokens


class TagScanner:
    """Token stream over a single text with region lookup helpers.

    The text is tokenized once on construction; every lookup afterwards is a
    linear walk over the tokens.

    Attributes:
        text: The source text.
        tokens: Tokens covering ``text``.

    Example:
        >>> scanner = TagScanner("<answer> 42 </answer>")
        >>> scanner.extract("answer")
        '42'
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)

    def region(self, name: str, start: int = 0, end: Optional[int] = None) -> Optional[Region]:
        """Find the first ``<name>...</name>`` pair.

        The region stops at the first matching close tag after the opening
        tag, so a nested region with the same name is truncated.

        Args:
            name: Tag name to look for.
            start: Only consider tokens starting at or after this offset.
            end: Only consider tokens ending at or before this offset.

        Returns:
            The region offsets, or None when no complete pair exists.
        """
        opening: Optional[Token] = None

        for token in self.iter_tokens(start, end):
            if opening is None:
                if token.kind is TokenKind.OPEN and token.name == name and token.value is None:
                    opening = token
            elif token.kind is TokenKind.CLOSE and token.name == name:
                return Region(name, opening.end, token.start, opening.start, token.end)

        return None

    def extract(self, name: str) -> str:
        """Return the trimmed content of the first ``<name>`` region, or ``""``."""
        found = self.region(name)
        if found is None:
            return ""
        return self.text[found.start:found.end].strip()

    def slice(self, region: Region) -> str:
        """Return the raw inner content of a region."""
        return self.text[region.start:region.end]

    def iter_tokens(self, start: int = 0, end: Optional[int] = None) -> Iterator[Token]:
        """Yield the tokens lying fully within ``[start, end)``."""
        limit = len(self.text) if end is None else end
        for token in self.tokens:
            if token.start < start:
                continue
            if token.end > limit:
                break
            yield token

    def __repr__(self) -> str:
        return f"TagScanner(length={len(self.text)}, tokens={len(self.tokens)})"

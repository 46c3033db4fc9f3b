"""Tag, reasoning and answer extraction.

These helpers never raise: a missing region, or input that is not text at
all, yields the empty string.
"""

import logging
from typing import Any

from omnidecode.core.tokenizer import TagScanner


logger = logging.getLogger(__name__)


def coerce_text(text: Any) -> str:
    """Turn arbitrary input into text suitable for decoding.

    Args:
        text: Value handed to the decoder.

    Returns:
        The value itself when it is a string, ``""`` for None, otherwise
        ``str(text)``.
    """
    if isinstance(text, str):
        return text
    if text is None:
        return ""
    logger.warning(f"Expected string input, got {type(text).__name__}")
    return str(text)


def extract_tag(text: Any, tag: str) -> str:
    """Return the trimmed content of the first ``<tag>...</tag>`` pair.

    Args:
        text: Text to search.
        tag: Tag name without angle brackets.

    Returns:
        The content of the first pair, or ``""`` when there is none.

    Example:
        >>> extract_tag("<answer> Paris </answer>", "answer")
        'Paris'
    """
    return TagScanner(coerce_text(text)).extract(tag)


def extract_reasoning(text: Any, think_tag: str = "think") -> str:
    """Return the content of the reasoning block."""
    return extract_tag(text, think_tag)


def extract_answer(text: Any, answer_tag: str = "answer") -> str:
    """Return the content of the answer block."""
    return extract_tag(text, answer_tag)

"""Core module for the omnidecode package.

This module contains the data model, configuration, shared tag tokenizer,
tag extraction helpers and the invocation synthesizer.
"""

from .config import DecoderConfig, IdStrategy, SEED_THINK_TAG
from .exceptions import ConfigurationError, PayloadDecodeError
from .models import Diagnostic, ParsedContent, Point, RawCall, ToolInvocation
from .synthesizer import InvocationSynthesizer
from .tags import extract_answer, extract_reasoning, extract_tag
from .tokenizer import Region, TagScanner, Token, TokenKind, tokenize

__all__ = [
    "DecoderConfig",
    "IdStrategy",
    "SEED_THINK_TAG",
    "ConfigurationError",
    "PayloadDecodeError",
    "Diagnostic",
    "ParsedContent",
    "Point",
    "RawCall",
    "ToolInvocation",
    "InvocationSynthesizer",
    "extract_answer",
    "extract_reasoning",
    "extract_tag",
    "Region",
    "TagScanner",
    "Token",
    "TokenKind",
    "tokenize",
]

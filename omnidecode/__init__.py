"""omnidecode - decoder for multimodal agent model output.

This package turns one block of raw generative-model output into a structured
instruction: separated reasoning, a user-facing answer, and zero or more
normalized tool invocations decoded from the code, tool or pointer
environment grammars.
"""

from omnidecode.assembler import (
    ContentParser,
    parse_code_content,
    parse_computer_content,
    parse_content,
    parse_mcp_content,
)
from omnidecode.core import (
    DecoderConfig,
    IdStrategy,
    ParsedContent,
    Point,
    SEED_THINK_TAG,
    ToolInvocation,
)
from omnidecode.decoders import Environment

__version__ = "0.1.0"

__all__ = [
    "ContentParser",
    "parse_code_content",
    "parse_computer_content",
    "parse_content",
    "parse_mcp_content",
    "DecoderConfig",
    "IdStrategy",
    "ParsedContent",
    "Point",
    "SEED_THINK_TAG",
    "ToolInvocation",
    "Environment",
]

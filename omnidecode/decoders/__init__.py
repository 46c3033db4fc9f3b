"""Environment decoders for the omnidecode package.

This module contains one decoder per environment grammar (code execution,
external tool invocation, and pointer/GUI actions) plus the registry the
assembler uses to pick one for the active environment.
"""

from omnidecode.decoders.base import BaseDecoder, DecodeOutcome, Environment
from omnidecode.decoders.code_decoder import CodeDecoder
from omnidecode.decoders.tool_decoder import ToolDecoder
from omnidecode.decoders.pointer_decoder import PointerDecoder
from omnidecode.decoders.registry import (
    available_environments,
    get_decoder_class,
    register_decoder,
    unregister_decoder,
)

__all__ = [
    "BaseDecoder",
    "DecodeOutcome",
    "Environment",
    "CodeDecoder",
    "ToolDecoder",
    "PointerDecoder",
    "available_environments",
    "get_decoder_class",
    "register_decoder",
    "unregister_decoder",
]

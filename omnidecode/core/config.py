"""Decoder configuration.

This module provides the ``DecoderConfig`` model holding the tag names,
sentinel markers and identifier settings shared by all environment decoders.
"""

import re
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from omnidecode.core.exceptions import ConfigurationError


# Reasoning tag emitted by the Seed family of models.
SEED_THINK_TAG = "think_never_used_51bce0c785ca2f68081bfa7d91973934"

_TAG_NAME_PATTERN = re.compile(r"^[A-Za-z_][\w.-]*$")
_SENTINEL_PATTERN = re.compile(r"^<\|[^|<>]+\|>$")


class IdStrategy(str, Enum):
    """How invocation identifiers are generated."""

    RANDOM = "random"
    SEQUENTIAL = "sequential"


class DecoderConfig(BaseModel):
    """Settings shared by the assembler, decoders and synthesizer.

    Attributes:
        think_tag: Tag name of the reasoning block.
        answer_tag: Tag name of the answer block.
        code_env_tag: Tag name of the code environment block.
        tool_env_tag: Tag name of the tool environment block.
        pointer_env_tag: Tag name of the pointer environment block.
        call_begin_sentinel: Marker opening the tool call array.
        call_end_sentinel: Marker closing the tool call array.
        id_prefix: Constant prefix of every invocation identifier.
        id_suffix_length: Length of the random identifier suffix.
        id_strategy: Identifier generation strategy.

    Example:
        >>> config = DecoderConfig(think_tag=SEED_THINK_TAG)
        >>> config.answer_tag
        'answer'
    """

    think_tag: str = Field(default="think", description="Tag name of the reasoning block")
    answer_tag: str = Field(default="answer", description="Tag name of the answer block")
    code_env_tag: str = Field(default="code_env", description="Tag name of the code environment block")
    tool_env_tag: str = Field(default="mcp_env", description="Tag name of the tool environment block")
    pointer_env_tag: str = Field(default="computer_env", description="Tag name of the pointer environment block")
    call_begin_sentinel: str = Field(
        default="<|FunctionCallBegin|>",
        description="Marker opening the tool call array"
    )
    call_end_sentinel: str = Field(
        default="<|FunctionCallEnd|>",
        description="Marker closing the tool call array"
    )
    id_prefix: str = Field(default="call", description="Constant prefix of every invocation identifier")
    id_suffix_length: int = Field(default=9, ge=4, le=32, description="Length of the random identifier suffix")
    id_strategy: IdStrategy = Field(default=IdStrategy.RANDOM, description="Identifier generation strategy")

    @field_validator("think_tag", "answer_tag", "code_env_tag", "tool_env_tag", "pointer_env_tag")
    @classmethod
    def check_tag_name(cls, value: str) -> str:
        if not _TAG_NAME_PATTERN.match(value):
            raise ValueError(f"invalid tag name: {value!r}")
        return value

    @field_validator("call_begin_sentinel", "call_end_sentinel")
    @classmethod
    def check_sentinel(cls, value: str) -> str:
        if not _SENTINEL_PATTERN.match(value):
            raise ValueError(f"sentinel must look like '<|Name|>': {value!r}")
        return value

    @model_validator(mode="after")
    def check_sentinel_pair(self) -> "DecoderConfig":
        if self.call_begin_sentinel == self.call_end_sentinel:
            raise ValueError("begin and end sentinels must differ")
        return self

    def __init__(self, **data: Any) -> None:
        """Validate the settings.

        Raises:
            ConfigurationError: If any value fails validation.
        """
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _configuration_error(e) from e

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DecoderConfig":
        """Build a configuration from a plain dictionary.

        Args:
            data: Mapping of setting names to values. Unknown keys are ignored.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If any value fails validation.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise _configuration_error(e) from e


def _configuration_error(error: ValidationError) -> ConfigurationError:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    return ConfigurationError(first.get("msg", str(error)), field=field, value=first.get("input"))

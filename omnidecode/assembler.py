"""Parse result assembler.

This module provides the ``ContentParser`` class, the single entry point the
agent loop uses to turn raw model output into a ``ParsedContent``: reasoning
and answer are extracted unconditionally, then exactly one environment
decoder (selected by the active environment) produces the tool invocations.

Decoding is a total function. Whatever the input, a ``ParsedContent`` is
returned; problems with the model output are reported through
``ParsedContent.diagnostics`` and the log, never raised.
"""

import logging
from typing import Any, Dict, Optional, Union

from omnidecode.core.config import DecoderConfig
from omnidecode.core.models import Diagnostic, ParsedContent
from omnidecode.core.synthesizer import InvocationSynthesizer
from omnidecode.core.tags import coerce_text
from omnidecode.core.tokenizer import TagScanner
from omnidecode.decoders.base import BaseDecoder, DecodeOutcome, Environment
from omnidecode.decoders.registry import environment_key, get_decoder_class


logger = logging.getLogger(__name__)


class ContentParser:
    """Decodes model output into reasoning, answer and tool invocations.

    Decoder instances are created lazily per environment and reused; they
    hold no per-call state, so one parser can be shared across threads.

    Attributes:
        config: Shared decoder configuration.
        synthesizer: Identifier generator for decoded calls.

    Example:
        >>> parser = ContentParser()
        >>> result = parser.parse(
        ...     "<think>list files</think><code_env><function=run>"
        ...     "<parameter=cmd>ls -la</code_env>",
        ...     Environment.CODE,
        ... )
        >>> result.actions[0].name, result.actions[0].arguments
        ('run', {'cmd': 'ls -la'})
    """

    def __init__(
        self,
        config: Optional[DecoderConfig] = None,
        synthesizer: Optional[InvocationSynthesizer] = None
    ) -> None:
        """Initialize the parser.

        Args:
            config: Shared configuration. Defaults are used when omitted.
            synthesizer: Identifier generator. Built from ``config`` when omitted.
        """
        self.config = config or DecoderConfig()
        self.synthesizer = synthesizer or InvocationSynthesizer(
            prefix=self.config.id_prefix,
            suffix_length=self.config.id_suffix_length,
            strategy=self.config.id_strategy
        )
        self._decoders: Dict[str, BaseDecoder] = {}

    def decoder_for(self, environment: Union[Environment, str]) -> BaseDecoder:
        """Return the decoder instance for an environment.

        Raises:
            ConfigurationError: If no decoder is registered for the environment.
        """
        key = environment_key(environment)
        decoder = self._decoders.get(key)
        if decoder is None:
            decoder = get_decoder_class(key)(self.config)
            self._decoders[key] = decoder
        return decoder

    def parse(self, text: Any, environment: Union[Environment, str]) -> ParsedContent:
        """Decode one block of model output.

        Args:
            text: Raw model output. Non-string input is coerced to text.
            environment: The active environment selecting the action grammar.

        Returns:
            The decoded content. Never raises for any input text.

        Raises:
            ConfigurationError: If no decoder is registered for ``environment``.
                This is a caller error and is checked before decoding starts.
        """
        decoder = self.decoder_for(environment)
        source = coerce_text(text)

        try:
            scanner = TagScanner(source)
            reasoning = scanner.extract(self.config.think_tag)
            answer = scanner.extract(self.config.answer_tag)
        except Exception as e:
            logger.exception(f"Unexpected error while scanning model output: {e}")
            return ParsedContent(diagnostics=[self._internal_error(decoder, e)])

        try:
            outcome = decoder.decode_scanner(scanner)
            actions = self.synthesizer.synthesize_all(outcome.calls)
        except Exception as e:
            logger.exception(f"Unexpected error in {decoder}: {e}")
            outcome = DecodeOutcome()
            outcome.diagnostics.append(self._internal_error(decoder, e))
            actions = []

        result = ParsedContent(
            reasoning=reasoning,
            answer=answer,
            actions=actions,
            diagnostics=outcome.diagnostics
        )

        logger.info(
            f"Parsed {decoder.environment_name} output: reasoning={len(reasoning)} chars, "
            f"answer={len(answer)} chars, actions={len(result.actions)}, "
            f"diagnostics={len(result.diagnostics)}"
        )
        return result

    @staticmethod
    def _internal_error(decoder: BaseDecoder, error: Exception) -> Diagnostic:
        return Diagnostic(
            environment=decoder.environment_name,
            kind="internal_error",
            message=f"Decoder failed: {type(error).__name__}: {error}",
            detail={"error_type": type(error).__name__}
        )


_default_parser: Optional[ContentParser] = None


def _get_default_parser() -> ContentParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = ContentParser()
    return _default_parser


def parse_content(
    text: Any,
    environment: Union[Environment, str],
    config: Optional[DecoderConfig] = None
) -> ParsedContent:
    """Decode model output for the given environment.

    Args:
        text: Raw model output.
        environment: The active environment.
        config: Optional configuration; a shared default parser is used when omitted.

    Returns:
        The decoded content.
    """
    parser = ContentParser(config) if config is not None else _get_default_parser()
    return parser.parse(text, environment)


def parse_code_content(text: Any, config: Optional[DecoderConfig] = None) -> ParsedContent:
    """Decode model output produced in the code environment."""
    return parse_content(text, Environment.CODE, config)


def parse_mcp_content(text: Any, config: Optional[DecoderConfig] = None) -> ParsedContent:
    """Decode model output produced in the tool environment."""
    return parse_content(text, Environment.TOOL, config)


def parse_computer_content(text: Any, config: Optional[DecoderConfig] = None) -> ParsedContent:
    """Decode model output produced in the pointer environment."""
    return parse_content(text, Environment.POINTER, config)

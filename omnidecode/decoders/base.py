"""Base decoder abstract class and environment definitions.

Every environment grammar is implemented as a ``BaseDecoder`` subclass with
one capability: decode a text into zero or more ``RawCall`` pairs plus any
non-fatal diagnostics. The assembler only ever talks to this interface.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional

from omnidecode.core.config import DecoderConfig
from omnidecode.core.exceptions import ConfigurationError
from omnidecode.core.models import Diagnostic, RawCall
from omnidecode.core.tags import coerce_text
from omnidecode.core.tokenizer import Region, TagScanner


logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Operating mode of the agent when the model produced its output."""

    CODE = "code"
    TOOL = "tool"
    POINTER = "pointer"

    @classmethod
    def from_name(cls, name: Any) -> "Environment":
        """Resolve an environment from its name or a known alias.

        Args:
            name: An ``Environment`` or a name such as ``"code"``, ``"mcp"``
                or ``"computer"``. Matching is case-insensitive.

        Returns:
            The matching environment.

        Raises:
            ConfigurationError: If the name is unknown.
        """
        if isinstance(name, cls):
            return name

        key = str(name).strip().lower()
        resolved = _ALIASES.get(key)
        if resolved is None:
            raise ConfigurationError(f"Unknown environment: {name!r}", field="environment", value=name)
        return resolved


_ALIASES = {
    "code": Environment.CODE,
    "code_env": Environment.CODE,
    "tool": Environment.TOOL,
    "mcp": Environment.TOOL,
    "mcp_env": Environment.TOOL,
    "pointer": Environment.POINTER,
    "computer": Environment.POINTER,
    "computer_env": Environment.POINTER,
    "gui": Environment.POINTER,
}


class DecodeOutcome:
    """Raw calls and diagnostics produced by one decoder run.

    Attributes:
        calls: Decoded calls in source order.
        diagnostics: Notes about output that was dropped or not understood.
    """

    def __init__(self) -> None:
        self.calls: List[RawCall] = []
        self.diagnostics: List[Diagnostic] = []

    def __repr__(self) -> str:
        return f"DecodeOutcome(calls={len(self.calls)}, diagnostics={len(self.diagnostics)})"


class BaseDecoder(ABC):
    """Abstract base class for environment decoders.

    Subclasses set ``environment`` and implement ``region_tag`` and
    ``_decode_region``. The base class locates the environment region and
    hands its inner offsets to the subclass; an absent region yields an empty
    outcome.

    Attributes:
        environment: Name of the environment handled by the decoder.
        config: Shared decoder configuration.

    Example:
        >>> class EchoDecoder(BaseDecoder):
        ...     environment = "echo"
        ...     region_tag = "echo_env"
        ...     def _decode_region(self, scanner, region, outcome):
        ...         outcome.calls.append(RawCall("echo", {"text": scanner.slice(region)}))
        >>> EchoDecoder().decode("<echo_env>hi</echo_env>").calls
        [RawCall(name='echo', arguments={'text': 'hi'})]
    """

    environment: str = ""

    def __init__(self, config: Optional[DecoderConfig] = None) -> None:
        """Initialize the decoder.

        Args:
            config: Shared configuration. Defaults are used when omitted.
        """
        self.config = config or DecoderConfig()

    @property
    @abstractmethod
    def region_tag(self) -> str:
        """Tag name of the environment region."""

    def decode(self, text: Any) -> DecodeOutcome:
        """Decode raw model output.

        Args:
            text: The full model output.

        Returns:
            The decoded calls and diagnostics.
        """
        return self.decode_scanner(TagScanner(coerce_text(text)))

    def decode_scanner(self, scanner: TagScanner) -> DecodeOutcome:
        """Decode an already tokenized model output."""
        outcome = DecodeOutcome()

        region = scanner.region(self.region_tag)
        if region is None:
            logger.debug(f"No <{self.region_tag}> region found")
            return outcome

        self._decode_region(scanner, region, outcome)
        logger.info(f"Decoded {len(outcome.calls)} call(s) from <{self.region_tag}> region")
        return outcome

    @abstractmethod
    def _decode_region(self, scanner: TagScanner, region: Region, outcome: DecodeOutcome) -> None:
        """Decode the calls inside a located environment region.

        Args:
            scanner: Token stream of the whole text.
            region: Offsets of the environment region.
            outcome: Collector for calls and diagnostics.
        """

    @property
    def environment_name(self) -> str:
        """Plain string name of the environment."""
        return str(getattr(self.environment, "value", self.environment))

    def _note(self, outcome: DecodeOutcome, kind: str, message: str, **detail: Any) -> None:
        """Record a non-fatal diagnostic and log it."""
        logger.warning(f"[{self.environment_name}] {message}")
        outcome.diagnostics.append(Diagnostic(
            environment=self.environment_name,
            kind=kind,
            message=message,
            detail=detail
        ))

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(region='{self.region_tag}')"

    def __repr__(self) -> str:
        return self.__str__()

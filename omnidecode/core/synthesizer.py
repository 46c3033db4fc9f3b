"""Invocation synthesizer.

Turns decoded ``RawCall`` pairs into ``ToolInvocation`` records with fresh
identifiers.

Two identifier strategies are available:

* ``random`` (default): ``{prefix}_{epoch_ms}_{suffix}`` where the suffix is
  drawn from ``[0-9a-z]``. Same-millisecond collisions are negligible but not
  formally excluded.
* ``sequential``: ``{prefix}_{instance}_{counter}`` using a random instance id
  and a lock-guarded monotonic counter, unique for the synthesizer's lifetime.
"""

import itertools
import logging
import random
import string
import threading
import time
from typing import Callable, Iterable, List, Optional

from omnidecode.core.config import IdStrategy
from omnidecode.core.models import RawCall, ToolInvocation


logger = logging.getLogger(__name__)


ID_ALPHABET = string.digits + string.ascii_lowercase


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class InvocationSynthesizer:
    """Assigns identifiers to decoded calls and packages them as invocations.

    Attributes:
        prefix: Constant identifier prefix.
        suffix_length: Length of the random suffix.
        strategy: Identifier generation strategy.

    Example:
        >>> synthesizer = InvocationSynthesizer()
        >>> call = synthesizer.synthesize(RawCall("click", {}))
        >>> call.id.startswith("call_")
        True
    """

    def __init__(
        self,
        prefix: str = "call",
        suffix_length: int = 9,
        strategy: IdStrategy = IdStrategy.RANDOM,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None
    ) -> None:
        """Initialize the synthesizer.

        Args:
            prefix: Constant identifier prefix.
            suffix_length: Length of the random suffix, and of the instance id
                for the sequential strategy.
            strategy: Identifier generation strategy.
            clock: Callable returning wall-clock milliseconds.
            rng: Random source for suffixes and the instance id.

        Raises:
            ValueError: If suffix_length is not positive.
        """
        if suffix_length <= 0:
            raise ValueError("Suffix length must be positive")

        self.prefix = prefix
        self.suffix_length = suffix_length
        self.strategy = IdStrategy(strategy)
        self._clock = clock or _wall_clock_ms
        self._rng = rng or random.SystemRandom()
        self._instance = self._random_suffix()
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def _random_suffix(self) -> str:
        return "".join(self._rng.choice(ID_ALPHABET) for _ in range(self.suffix_length))

    def next_id(self) -> str:
        """Generate a new invocation identifier.

        Returns:
            A fresh identifier string.
        """
        if self.strategy is IdStrategy.SEQUENTIAL:
            with self._lock:
                sequence = next(self._counter)
            return f"{self.prefix}_{self._instance}_{sequence}"

        return f"{self.prefix}_{self._clock()}_{self._random_suffix()}"

    def synthesize(self, call: RawCall) -> ToolInvocation:
        """Package one decoded call with a fresh identifier."""
        invocation = ToolInvocation(id=self.next_id(), name=call.name, arguments=dict(call.arguments))
        logger.debug(f"Synthesized invocation {invocation.id} for {invocation.name}")
        return invocation

    def synthesize_all(self, calls: Iterable[RawCall]) -> List[ToolInvocation]:
        """Package decoded calls in order."""
        return [self.synthesize(call) for call in calls]

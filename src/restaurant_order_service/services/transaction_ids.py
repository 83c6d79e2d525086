"""Transaction identifier generators for confirmed payments.

Identifiers name receipt files, so two payments must never share one.
"""

import itertools
import logging
import uuid
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class TransactionIdGenerator(ABC):
    """Abstract source of opaque transaction identifiers."""

    @abstractmethod
    def next_id(self) -> str:
        """Return an identifier not handed out before by this generator."""
        pass


class RandomTransactionIdGenerator(TransactionIdGenerator):
    """Random 48-bit identifiers with an in-process repeat check.

    The random space keeps identifiers unique across runs writing into the
    same receipt directory; the seen set rules out repeats within a run.
    The seen set keeps one entry per payment for the life of the process,
    which stays small at a restaurant's daily volume.
    """

    def __init__(self, length: int = 12, max_attempts: int = 10) -> None:
        """Initialize the generator.

        Args:
            length: Number of hex characters per identifier (1-32)
            max_attempts: Draws allowed before giving up on a fresh identifier

        Raises:
            ValueError: If length or max_attempts is out of range
        """
        if not 1 <= length <= 32:
            raise ValueError("length must be between 1 and 32")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")

        self.length = length
        self.max_attempts = max_attempts
        self._issued: set[str] = set()

    def next_id(self) -> str:
        for _ in range(self.max_attempts):
            candidate = uuid.uuid4().hex[: self.length]
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
            logger.warning(f"Transaction id {candidate} already issued, drawing again")

        raise RuntimeError(
            f"Could not draw an unused transaction id after {self.max_attempts} attempts"
        )


class SequentialTransactionIdGenerator(TransactionIdGenerator):
    """Monotonic counter identifiers, e.g. ``1000``, ``1001``, ..."""

    def __init__(self, start: int = 1000) -> None:
        self._counter = itertools.count(start)

    def next_id(self) -> str:
        return str(next(self._counter))

from abc import ABC, abstractmethod
from typing import List, Optional

from core.domain.entities.signal_entity import SignalEntity


class SignalRepository(ABC):
    """
    Repository interface for open signals, one per normalized symbol.
    """

    @abstractmethod
    async def put(self, signal: SignalEntity) -> None:
        """
        Store the signal under its symbol, replacing any previous one.
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, symbol: str) -> Optional[SignalEntity]:
        """Return the open signal for a symbol, or None."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, symbol: str) -> bool:
        """
        Remove the signal for a symbol if present.

        Returns:
            True if a signal was removed, False if there was nothing to remove.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_open(self) -> List[SignalEntity]:
        """Return all open signals, oldest first."""
        raise NotImplementedError

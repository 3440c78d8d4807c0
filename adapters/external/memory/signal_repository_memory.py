import logging
from typing import Dict, List, Optional

from core.domain.entities.signal_entity import SignalEntity
from core.repositories.signal_repository import SignalRepository


class SignalRepositoryMemory(SignalRepository):
    """
    Process-local signal registry (symbol -> SignalEntity).

    Nothing expires: a signal lives until it is deleted or replaced by a
    newer entry for the same symbol. Contents are lost on restart.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._signals: Dict[str, SignalEntity] = {}
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def put(self, signal: SignalEntity) -> None:
        signal.stamp_created()
        previous = self._signals.get(signal.symbol)
        if previous is not None:
            self._logger.info(
                "Replacing open signal for %s (message %s -> %s)",
                signal.symbol,
                previous.channel_message_id,
                signal.channel_message_id,
            )
        self._signals[signal.symbol] = signal
        self._logger.info("Stored signal for %s: %s", signal.symbol, signal.to_dict())

    async def get(self, symbol: str) -> Optional[SignalEntity]:
        return self._signals.get(symbol)

    async def delete(self, symbol: str) -> bool:
        removed = self._signals.pop(symbol, None) is not None
        self._logger.info("Removed signal for %s: %s", symbol, removed)
        return removed

    async def list_open(self) -> List[SignalEntity]:
        return sorted(self._signals.values(), key=lambda s: s.created_at or 0)

from typing import Union

from pydantic import ConfigDict

from ..enums.signal_enums import SignalSide
from .base_entity import BaseEntity


class SignalEntity(BaseEntity):
    """
    An open signal tracked per symbol.

    `channel_message_id` is the id of the message that announced the entry;
    every later TP/close update for the symbol replies to it.
    """

    symbol: str
    side: SignalSide
    entry_price: Union[int, float, str]
    channel_message_id: int

    model_config = ConfigDict(
        use_enum_values=True,
        extra="ignore",
    )

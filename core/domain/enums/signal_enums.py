from enum import Enum


class SignalSide(str, Enum):
    LONG = "long"
    SHORT = "short"


class SignalEventKind(str, Enum):
    ENTRY = "entry"
    TAKE_PROFIT = "tp"
    FINAL_TAKE_PROFIT = "lastTp"
    CLOSE = "close"


class ReplyAnchorMode(str, Enum):
    """
    Where follow-up messages find the message they reply to.

    REGISTRY: the in-memory signal registry (filled on new entries).
    CHANNEL_HISTORY: the gateway's search over recently sent messages.
    """

    REGISTRY = "registry"
    CHANNEL_HISTORY = "channel_history"

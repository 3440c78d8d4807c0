from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..enums.signal_enums import ReplyAnchorMode


class DeploymentProfile(BaseModel):
    """
    Per-endpoint routing policy for the relay use case.

    - signal_chat_id: channel receiving entries and closes.
    - promotion_chat_id: channel receiving TP results.
    - reply_anchor: how closes/TPs find the message to reply to.
    - mention: optional trailing line appended to entry messages.
    """

    name: str
    signal_chat_id: str
    promotion_chat_id: str
    reply_anchor: ReplyAnchorMode = ReplyAnchorMode.REGISTRY
    mention: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def uses_registry(self) -> bool:
        return self.reply_anchor == ReplyAnchorMode.REGISTRY

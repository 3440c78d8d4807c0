from abc import ABC, abstractmethod
from typing import Optional, Union

ChatId = Union[str, int]


class ChannelGateway(ABC):
    """
    Outbound messaging port: one implementation per bot account.
    """

    @abstractmethod
    async def send_message(
        self,
        chat_id: ChatId,
        text: str,
        reply_to: Optional[int] = None,
        rich_text: bool = False,
    ) -> int:
        """
        Send `text` to `chat_id`, optionally as a reply to message `reply_to`.

        Args:
            rich_text: render as MarkdownV2 (text must already be escaped).

        Returns:
            The id of the sent message.

        Raises:
            DeliveryError: on any failure (network, auth, rate limit, ...).
        """
        raise NotImplementedError

    @abstractmethod
    async def find_latest_message_with_symbol(
        self, chat_id: ChatId, symbol: str
    ) -> Optional[int]:
        """
        Return the id of the most recent message in `chat_id` tagging `symbol`,
        or None. How far back the search goes is up to the implementation.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        return None

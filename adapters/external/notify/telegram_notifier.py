import logging
import re
from collections import deque
from typing import Deque, NamedTuple, Optional

import httpx

from core.domain.errors import DeliveryError
from core.gateways.channel_gateway import ChannelGateway, ChatId

# Telegram hard limit is 4096 characters
MAX_LEN = 4096
TRUNCATION_MARKER = "\n\n[... message truncated ...]"


class SentMessage(NamedTuple):
    chat_id: str
    message_id: int
    text: str


class TelegramNotifier(ChannelGateway):
    """
    Bot API gateway for a single bot token.

    Remembers the last `history_depth` messages it sent so that
    find_latest_message_with_symbol can resolve reply anchors without
    reading channel history (which the Bot API does not expose).
    """

    def __init__(
        self,
        bot_token: str,
        api_base_url: str = "https://api.telegram.org",
        timeout_sec: float = 10.0,
        history_depth: int = 200,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.bot_token = bot_token
        self._base_url = (api_base_url or "").rstrip("/")
        self._logger = logger or logging.getLogger(self.__class__.__name__)
        self._client = client or httpx.AsyncClient(timeout=timeout_sec)
        self._history: Deque[SentMessage] = deque(maxlen=max(1, int(history_depth)))

    def _url(self, method: str) -> str:
        return f"{self._base_url}/bot{self.bot_token}/{method}"

    async def send_message(
        self,
        chat_id: ChatId,
        text: str,
        reply_to: Optional[int] = None,
        rich_text: bool = False,
    ) -> int:
        if not self.bot_token:
            raise DeliveryError("Telegram bot token is not configured")
        if not text:
            raise DeliveryError("Refusing to send an empty message")

        if len(text) > MAX_LEN:
            text = text[: MAX_LEN - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER

        payload = {
            "chat_id": chat_id,
            "text": text,
        }
        if reply_to is not None:
            payload["reply_to_message_id"] = reply_to
            # TP posts reply across channels; a missing anchor must not drop them
            payload["allow_sending_without_reply"] = True
        if rich_text:
            payload["parse_mode"] = "MarkdownV2"

        try:
            resp = await self._client.post(self._url("sendMessage"), json=payload)
        except httpx.HTTPError as exc:
            self._logger.error("Telegram transport error: %s", exc)
            raise DeliveryError(f"Telegram transport error: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {"raw": resp.text}

        if resp.status_code >= 400 or not data.get("ok"):
            # Keep Telegram's own description for the logs
            self._logger.error("Telegram error %s: %s", resp.status_code, data)
            description = data.get("description") or f"HTTP {resp.status_code}"
            raise DeliveryError(f"Telegram error: {description}")

        try:
            message_id = int(data["result"]["message_id"])
        except (KeyError, TypeError, ValueError) as exc:
            self._logger.error("Telegram response without message_id: %s", data)
            raise DeliveryError("Telegram response without message_id") from exc

        self._history.append(SentMessage(str(chat_id), message_id, text))
        return message_id

    async def find_latest_message_with_symbol(
        self, chat_id: ChatId, symbol: str
    ) -> Optional[int]:
        if not symbol:
            return None
        # '#OM/USDT' must not match '#OM/USDT2' or '#XOM/USDT'
        tag = re.compile(r"(?<![\w/])#" + re.escape(symbol) + r"(?![\w/])")
        for sent in reversed(self._history):
            if sent.chat_id == str(chat_id) and tag.search(sent.text):
                return sent.message_id
        return None

    async def aclose(self) -> None:
        await self._client.aclose()

import logging
from typing import Optional, Union

from pydantic import BaseModel

from core.domain.entities.deployment_profile_entity import DeploymentProfile
from core.domain.entities.signal_entity import SignalEntity
from core.domain.entities.signal_event_entity import (
    CloseEvent,
    FinalTakeProfitEvent,
    NewEntryEvent,
    SignalEvent,
    TakeProfitEvent,
)
from core.domain.enums.signal_enums import ReplyAnchorMode
from core.domain.errors import DeliveryError
from core.gateways.channel_gateway import ChannelGateway
from core.repositories.signal_repository import SignalRepository
from core.services import message_formatter as fmt


class RelayResult(BaseModel):
    status: str
    message: str


class RelaySignalEventUseCase:
    """
    Relays one webhook event to Telegram and keeps the signal registry in sync.

    Flow per event kind:
      - entry:      post to the signal channel, then register the message id.
      - tp/lastTp:  post the results to the promotion channel, replying to the
                    open signal when there is one; lastTp forgets the signal.
      - close:      post to the signal channel replying to the open signal
                    (or standalone) and forget it.

    The registry is only written after a successful send, so a DeliveryError
    never leaves partial state behind. Nothing is retried.
    """

    def __init__(
        self,
        profile: DeploymentProfile,
        signal_gateway: ChannelGateway,
        promotion_gateway: ChannelGateway,
        signal_repo: SignalRepository,
        promotion_link: str,
        promotion_mention: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._profile = profile
        self._signal_gateway = signal_gateway
        self._promotion_gateway = promotion_gateway
        self._signal_repo = signal_repo
        self._promotion_link = promotion_link
        self._promotion_mention = promotion_mention
        self._logger = logger or logging.getLogger(f"{self.__class__.__name__}[{profile.name}]")

    @property
    def profile(self) -> DeploymentProfile:
        return self._profile

    async def execute(self, event: SignalEvent) -> RelayResult:
        symbol = fmt.normalize_symbol(event.symbol)
        self._logger.info("Relaying %s event for %s (%s)", event.kind, symbol, event.side)

        if isinstance(event, CloseEvent):
            return await self._close(event, symbol)
        if isinstance(event, (TakeProfitEvent, FinalTakeProfitEvent)):
            return await self._take_profit(event, symbol)
        return await self._new_entry(event, symbol)

    async def _new_entry(self, event: NewEntryEvent, symbol: str) -> RelayResult:
        text = fmt.format_entry_message(
            side=event.side,
            symbol=symbol,
            entry_price=event.entry_price,
            targets=event.target_list,
            stop_loss=event.stop_loss,
            mention=self._profile.mention,
        )
        message_id = await self._send(
            self._signal_gateway,
            self._profile.signal_chat_id,
            text,
            failure="Failed to send message",
        )

        if self._profile.uses_registry:
            await self._signal_repo.put(
                SignalEntity(
                    symbol=symbol,
                    side=event.side,
                    entry_price=event.entry_price,
                    channel_message_id=message_id,
                )
            )
        return RelayResult(status="Message sent", message=text)

    async def _take_profit(
        self, event: Union[TakeProfitEvent, FinalTakeProfitEvent], symbol: str
    ) -> RelayResult:
        profit = fmt.compute_profit(
            event.side, fmt.POSITION_SIZE, fmt.LEVERAGE, event.entry_price, event.exit_price
        )
        text = fmt.format_promotion_message(
            side=event.side,
            symbol=symbol,
            entry_price=event.entry_price,
            exit_price=event.exit_price,
            profit=profit,
            label=event.price_label,
            link=self._promotion_link,
            mention=self._promotion_mention,
        )

        # TP results go to another channel; only the registry anchor is reused there
        reply_to: Optional[int] = None
        if self._profile.uses_registry:
            stored = await self._signal_repo.get(symbol)
            if stored is not None:
                reply_to = stored.channel_message_id

        await self._send(
            self._promotion_gateway,
            self._profile.promotion_chat_id,
            text,
            reply_to=reply_to,
            rich_text=True,
            failure=f"Failed to send {event.kind} message",
        )

        if isinstance(event, FinalTakeProfitEvent) and self._profile.uses_registry:
            await self._signal_repo.delete(symbol)
        return RelayResult(status=f"{event.kind} message sent", message=text)

    async def _close(self, event: CloseEvent, symbol: str) -> RelayResult:
        text = fmt.format_close_message(symbol, event.side)
        reply_to = await self._resolve_close_anchor(symbol)

        await self._send(
            self._signal_gateway,
            self._profile.signal_chat_id,
            text,
            reply_to=reply_to,
            failure="Failed to send close message",
        )

        if reply_to is not None and self._profile.uses_registry:
            await self._signal_repo.delete(symbol)
        return RelayResult(status="Close message sent", message=text)

    async def _resolve_close_anchor(self, symbol: str) -> Optional[int]:
        if self._profile.reply_anchor == ReplyAnchorMode.CHANNEL_HISTORY:
            try:
                return await self._signal_gateway.find_latest_message_with_symbol(
                    self._profile.signal_chat_id, symbol
                )
            except DeliveryError as exc:
                self._logger.exception("Anchor lookup failed for %s", symbol)
                raise DeliveryError("Failed to send close message") from exc

        stored = await self._signal_repo.get(symbol)
        return stored.channel_message_id if stored is not None else None

    async def _send(
        self,
        gateway: ChannelGateway,
        chat_id: str,
        text: str,
        failure: str,
        reply_to: Optional[int] = None,
        rich_text: bool = False,
    ) -> int:
        try:
            return await gateway.send_message(
                chat_id, text, reply_to=reply_to, rich_text=rich_text
            )
        except DeliveryError as exc:
            self._logger.error("%s to %s: %s", failure, chat_id, exc.reason)
            raise DeliveryError(failure) from exc
        except Exception as exc:
            self._logger.exception("%s to %s", failure, chat_id)
            raise DeliveryError(failure) from exc

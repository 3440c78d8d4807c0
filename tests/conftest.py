"""
Shared fixtures for the relay tests.

Provides:
- FakeChannelGateway: records every send and hands out increasing message ids
- Main / real deployment profiles wired to fake gateways
- A TestClient whose dependencies point at those use cases
"""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from adapters.entry.http.deps import (
    get_real_channel_use_case,
    get_signal_repo,
    get_webhook_use_case,
)
from adapters.external.memory.signal_repository_memory import SignalRepositoryMemory
from core.domain.entities.deployment_profile_entity import DeploymentProfile
from core.domain.enums.signal_enums import ReplyAnchorMode
from core.domain.errors import DeliveryError
from core.gateways.channel_gateway import ChannelGateway
from core.usecases.relay_signal_event_use_case import RelaySignalEventUseCase
from main import app


class FakeChannelGateway(ChannelGateway):
    """In-memory gateway: records sends, optionally fails them."""

    def __init__(self, first_message_id: int = 100):
        self.sent: List[dict] = []
        self.fail_with: Optional[Exception] = None
        self.lookup_result: Optional[int] = None
        self.lookups: List[tuple] = []
        self._next_id = first_message_id

    async def send_message(self, chat_id, text, reply_to=None, rich_text=False) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        message_id = self._next_id
        self._next_id += 1
        self.sent.append(
            {
                "chat_id": chat_id,
                "text": text,
                "reply_to": reply_to,
                "rich_text": rich_text,
                "message_id": message_id,
            }
        )
        return message_id

    async def find_latest_message_with_symbol(self, chat_id, symbol):
        self.lookups.append((chat_id, symbol))
        return self.lookup_result


@pytest.fixture
def signal_repo():
    return SignalRepositoryMemory()


@pytest.fixture
def signal_gateway():
    return FakeChannelGateway(first_message_id=100)


@pytest.fixture
def promotion_gateway():
    return FakeChannelGateway(first_message_id=900)


@pytest.fixture
def real_gateway():
    return FakeChannelGateway(first_message_id=500)


@pytest.fixture
def main_use_case(signal_repo, signal_gateway, promotion_gateway):
    profile = DeploymentProfile(
        name="main",
        signal_chat_id="@signals",
        promotion_chat_id="@promo",
        reply_anchor=ReplyAnchorMode.REGISTRY,
        mention="@AI_tradesbot",
    )
    return RelaySignalEventUseCase(
        profile=profile,
        signal_gateway=signal_gateway,
        promotion_gateway=promotion_gateway,
        signal_repo=signal_repo,
        promotion_link="https://ai-trade.io/sign-up",
        promotion_mention="@AI_tradesbot",
    )


@pytest.fixture
def real_use_case(signal_repo, real_gateway):
    profile = DeploymentProfile(
        name="real",
        signal_chat_id="@real",
        promotion_chat_id="@promo",
        reply_anchor=ReplyAnchorMode.CHANNEL_HISTORY,
        mention=None,
    )
    return RelaySignalEventUseCase(
        profile=profile,
        signal_gateway=real_gateway,
        promotion_gateway=real_gateway,
        signal_repo=signal_repo,
        promotion_link="https://ai-trade.io/sign-up",
    )


@pytest.fixture
def client(signal_repo, main_use_case, real_use_case):
    """
    TestClient without lifespan: no real Telegram clients are created.
    """
    app.dependency_overrides[get_signal_repo] = lambda: signal_repo
    app.dependency_overrides[get_webhook_use_case] = lambda: main_use_case
    app.dependency_overrides[get_real_channel_use_case] = lambda: real_use_case
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def delivery_error():
    return DeliveryError("Telegram error: Forbidden: bot is not a member of the channel")

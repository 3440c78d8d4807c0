"""
Tests for the Telegram Bot API gateway, using httpx.MockTransport.
"""

import json

import httpx
import pytest

from adapters.external.notify.telegram_notifier import MAX_LEN, TelegramNotifier
from core.domain.errors import DeliveryError


def _notifier(handler, history_depth=200, token="TOKEN"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramNotifier(
        bot_token=token,
        api_base_url="https://api.telegram.test",
        history_depth=history_depth,
        client=client,
    )


def _ok_handler(requests):
    counter = {"next": 1}

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        message_id = counter["next"]
        counter["next"] += 1
        return httpx.Response(200, json={"ok": True, "result": {"message_id": message_id}})

    return handler


@pytest.mark.asyncio
async def test_send_plain_message():
    requests = []
    notifier = _notifier(_ok_handler(requests))

    message_id = await notifier.send_message("@signals", "hello")

    assert message_id == 1
    assert requests[0].url.path == "/botTOKEN/sendMessage"
    body = json.loads(requests[0].content)
    assert body == {"chat_id": "@signals", "text": "hello"}
    await notifier.aclose()


@pytest.mark.asyncio
async def test_send_rich_reply():
    requests = []
    notifier = _notifier(_ok_handler(requests))

    await notifier.send_message("@promo", "*hi*", reply_to=77, rich_text=True)

    body = json.loads(requests[0].content)
    assert body["reply_to_message_id"] == 77
    assert body["allow_sending_without_reply"] is True
    assert body["parse_mode"] == "MarkdownV2"
    await notifier.aclose()


@pytest.mark.asyncio
async def test_telegram_error_raises_delivery_error():
    def handler(request):
        return httpx.Response(403, json={"ok": False, "description": "Forbidden: bot was kicked"})

    notifier = _notifier(handler)

    with pytest.raises(DeliveryError) as exc_info:
        await notifier.send_message("@signals", "hello")

    assert "Forbidden" in exc_info.value.reason
    await notifier.aclose()


@pytest.mark.asyncio
async def test_transport_error_raises_delivery_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    notifier = _notifier(handler)

    with pytest.raises(DeliveryError):
        await notifier.send_message("@signals", "hello")
    await notifier.aclose()


@pytest.mark.asyncio
async def test_missing_token_fails_without_http_call():
    requests = []
    notifier = _notifier(_ok_handler(requests), token="")

    with pytest.raises(DeliveryError):
        await notifier.send_message("@signals", "hello")

    assert requests == []
    await notifier.aclose()


@pytest.mark.asyncio
async def test_long_message_is_truncated():
    requests = []
    notifier = _notifier(_ok_handler(requests))

    await notifier.send_message("@signals", "x" * (MAX_LEN + 500))

    body = json.loads(requests[0].content)
    assert len(body["text"]) == MAX_LEN
    assert body["text"].endswith("[... message truncated ...]")
    await notifier.aclose()


@pytest.mark.asyncio
async def test_find_latest_message_with_symbol():
    notifier = _notifier(_ok_handler([]))

    await notifier.send_message("@real", "🟢 Long\n\n#OM/USDT\n\nEntry : 7.5")  # id 1
    await notifier.send_message("@real", "🟢 Long\n\n#XOM/USDT\n\nEntry : 3")  # id 2
    await notifier.send_message("@other", "#OM/USDT #long\nClose the Signal")  # id 3
    await notifier.send_message("@real", "🔴 SHORT\n\n#OM/USDT\n\nEntry : 7.9")  # id 4
    await notifier.send_message("@real", "🔴 SHORT\n\n#BTC/USDT\n\nEntry : 100")  # id 5

    assert await notifier.find_latest_message_with_symbol("@real", "OM/USDT") == 4
    assert await notifier.find_latest_message_with_symbol("@real", "XOM/USDT") == 2
    assert await notifier.find_latest_message_with_symbol("@real", "ETH/USDT") is None
    await notifier.aclose()


@pytest.mark.asyncio
async def test_history_search_is_bounded():
    notifier = _notifier(_ok_handler([]), history_depth=2)

    await notifier.send_message("@real", "#OM/USDT")
    await notifier.send_message("@real", "#BTC/USDT")
    await notifier.send_message("@real", "#ETH/USDT")

    assert await notifier.find_latest_message_with_symbol("@real", "OM/USDT") is None
    assert await notifier.find_latest_message_with_symbol("@real", "ETH/USDT") == 3
    await notifier.aclose()

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from adapters.entry.http.webhook_router import router as webhook_router
from adapters.external.memory.signal_repository_memory import SignalRepositoryMemory
from adapters.external.notify.telegram_notifier import TelegramNotifier
from config.settings import settings
from core.domain.entities.deployment_profile_entity import DeploymentProfile
from core.domain.enums.signal_enums import ReplyAnchorMode
from core.usecases.relay_signal_event_use_case import RelaySignalEventUseCase


def _setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _build_notifier(role: str, token: str) -> TelegramNotifier:
    if not token:
        logging.getLogger(__name__).warning(
            "No bot token configured for the %s bot; its sends will fail.", role
        )
    return TelegramNotifier(
        bot_token=token,
        api_base_url=settings.TELEGRAM_API_BASE_URL,
        timeout_sec=settings.TELEGRAM_TIMEOUT_SEC,
        history_depth=settings.TELEGRAM_HISTORY_DEPTH,
        logger=logging.getLogger(f"TelegramNotifier[{role}]"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting %s (lifespan startup)...", settings.APP_NAME)

    primary_bot = _build_notifier("primary", settings.TELEGRAM_BOT_TOKEN)
    promotion_bot = _build_notifier("promotion", settings.TELEGRAM_BOT_TOKEN_2)
    real_bot = _build_notifier("real", settings.TELEGRAM_BOT_TOKEN_REAL)

    # One registry for the process; only the main profile writes to it
    signal_repo = SignalRepositoryMemory()

    main_profile = DeploymentProfile(
        name="main",
        signal_chat_id=settings.TELEGRAM_CHANNEL_ID,
        promotion_chat_id=settings.TELEGRAM_CHANNEL_PROMOTION,
        reply_anchor=ReplyAnchorMode.REGISTRY,
        mention=settings.SIGNAL_MENTION or None,
    )
    real_profile = DeploymentProfile(
        name="real",
        signal_chat_id=settings.TELEGRAM_CHANNEL_ID_REAL,
        promotion_chat_id=settings.TELEGRAM_CHANNEL_PROMOTION,
        reply_anchor=ReplyAnchorMode.CHANNEL_HISTORY,
        mention=settings.REAL_SIGNAL_MENTION or None,
    )

    app.state.signal_repo = signal_repo
    app.state.webhook_use_case = RelaySignalEventUseCase(
        profile=main_profile,
        signal_gateway=primary_bot,
        promotion_gateway=promotion_bot,
        signal_repo=signal_repo,
        promotion_link=settings.PROMOTION_LINK,
        promotion_mention=settings.SIGNAL_MENTION or None,
    )
    app.state.real_channel_use_case = RelaySignalEventUseCase(
        profile=real_profile,
        signal_gateway=real_bot,
        promotion_gateway=real_bot,
        signal_repo=signal_repo,
        promotion_link=settings.PROMOTION_LINK,
        promotion_mention=settings.SIGNAL_MENTION or None,
    )

    try:
        yield
    finally:
        logger.info("Shutting down %s (lifespan shutdown)...", settings.APP_NAME)
        for bot in (primary_bot, promotion_bot, real_bot):
            await bot.aclose()
        logger.info("Telegram clients closed.")


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)

app.include_router(webhook_router)


@app.get("/")
async def healthz():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

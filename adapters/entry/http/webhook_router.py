import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from core.domain.errors import DeliveryError, InvalidPayloadError
from core.repositories.signal_repository import SignalRepository
from core.services.signal_event_parser_service import SignalEventParserService
from core.usecases.relay_signal_event_use_case import RelaySignalEventUseCase

from .deps import get_real_channel_use_case, get_signal_repo, get_webhook_use_case


router = APIRouter(tags=["webhook"])

_parser = SignalEventParserService()


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw or b"null")
    except ValueError as exc:
        raise InvalidPayloadError("Invalid payload: body is not valid JSON") from exc


async def _relay(request: Request, uc: RelaySignalEventUseCase) -> JSONResponse:
    logger = logging.getLogger(f"WebhookRouter[{uc.profile.name}]")
    try:
        payload = await _read_json(request)
        logger.info("Inbound webhook: %s", payload)
        event = _parser.parse(payload)
        result = await uc.execute(event)
    except InvalidPayloadError as exc:
        logger.warning("Rejected webhook: %s", exc.reason)
        return JSONResponse(status_code=400, content={"error": exc.reason})
    except DeliveryError as exc:
        return JSONResponse(status_code=500, content={"error": exc.reason})

    return JSONResponse(status_code=200, content=result.model_dump())


@router.post("/webhook")
async def webhook(
    request: Request,
    uc: RelaySignalEventUseCase = Depends(get_webhook_use_case),
) -> JSONResponse:
    return await _relay(request, uc)


@router.post("/real-channel")
async def real_channel(
    request: Request,
    uc: RelaySignalEventUseCase = Depends(get_real_channel_use_case),
) -> JSONResponse:
    return await _relay(request, uc)


@router.get("/signals")
async def list_signals(
    signal_repo: SignalRepository = Depends(get_signal_repo),
) -> Dict[str, Any]:
    signals = await signal_repo.list_open()
    return {"signals": [s.to_dict() for s in signals]}

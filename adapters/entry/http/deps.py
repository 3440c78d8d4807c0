from fastapi import Request

from core.repositories.signal_repository import SignalRepository
from core.usecases.relay_signal_event_use_case import RelaySignalEventUseCase


def _from_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized. Check app lifespan startup.")
    return value


def get_signal_repo(request: Request) -> SignalRepository:
    return _from_state(request, "signal_repo")


def get_webhook_use_case(request: Request) -> RelaySignalEventUseCase:
    return _from_state(request, "webhook_use_case")


def get_real_channel_use_case(request: Request) -> RelaySignalEventUseCase:
    return _from_state(request, "real_channel_use_case")

from typing import Any, Dict

from pydantic import TypeAdapter, ValidationError

from core.domain.entities.signal_event_entity import SignalEvent
from core.domain.enums.signal_enums import SignalEventKind
from core.domain.errors import InvalidPayloadError

_EVENT_ADAPTER: TypeAdapter = TypeAdapter(SignalEvent)


class SignalEventParserService:
    """
    Turns a raw webhook body into a typed SignalEvent.

    Classification uses the `message` field (first match wins):
      - "close"          -> CloseEvent
      - "tp" / "lastTp"  -> TakeProfitEvent / FinalTakeProfitEvent
      - anything else    -> NewEntryEvent
    The chosen kind becomes the union discriminator, so each payload is
    validated exactly once against its own required-field set.
    """

    def classify(self, payload: Dict[str, Any]) -> SignalEventKind:
        message = payload.get("message")
        if message == SignalEventKind.CLOSE.value:
            return SignalEventKind.CLOSE
        if message == SignalEventKind.TAKE_PROFIT.value:
            return SignalEventKind.TAKE_PROFIT
        if message == SignalEventKind.FINAL_TAKE_PROFIT.value:
            return SignalEventKind.FINAL_TAKE_PROFIT
        return SignalEventKind.ENTRY

    def parse(self, payload: Any) -> SignalEvent:
        if not isinstance(payload, dict):
            raise InvalidPayloadError("Invalid payload: expected a JSON object")

        kind = self.classify(payload)
        try:
            return _EVENT_ADAPTER.validate_python({**payload, "kind": kind.value})
        except ValidationError as exc:
            raise InvalidPayloadError(self._describe(kind, exc)) from exc

    @staticmethod
    def _describe(kind: SignalEventKind, exc: ValidationError) -> str:
        problems = []
        for err in exc.errors():
            # loc starts with the union tag, e.g. ("tp", "tpPrice")
            fields = [str(p) for p in err.get("loc", ()) if str(p) != kind.value]
            field = ".".join(fields) or "payload"
            problems.append(f"{field}: {err.get('msg', 'invalid value')}")

        prefix = "Invalid payload" if kind == SignalEventKind.ENTRY else f"Invalid {kind.value} payload"
        return f"{prefix}: " + "; ".join(problems)

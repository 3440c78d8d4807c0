from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..enums.signal_enums import SignalSide

# Prices keep the sender's type so the original precision can be rendered back
PriceValue = Union[int, float, str]


def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    if isinstance(v, (list, tuple)):
        return len(v) == 0
    return False


class _SignalEventBase(BaseModel):
    """
    Fields shared by every inbound webhook event.
    Wire names are camelCase; `kind` is injected by the parser from `message`.
    """

    symbol: str
    side: SignalSide

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    @field_validator("symbol", mode="before")
    @classmethod
    def _strip_symbol(cls, v: Any) -> Any:
        if _is_blank(v):
            raise ValueError("symbol is required")
        return v.strip() if isinstance(v, str) else v

    @field_validator("side", mode="before")
    @classmethod
    def _lower_side(cls, v: Any) -> Any:
        if _is_blank(v):
            raise ValueError("side is required")
        if isinstance(v, str):
            return v.strip().lower()
        return v


class NewEntryEvent(_SignalEventBase):
    kind: Literal["entry"] = "entry"
    entry_price: PriceValue = Field(..., alias="entryPrice")
    targets: Union[List[PriceValue], PriceValue]
    stop_loss: PriceValue = Field(..., alias="stopLoss")

    @field_validator("entry_price", "targets", "stop_loss", mode="before")
    @classmethod
    def _required(cls, v: Any, info: ValidationInfo) -> Any:
        if _is_blank(v):
            raise ValueError(f"{info.field_name} is required")
        return v

    @property
    def target_list(self) -> List[PriceValue]:
        if isinstance(self.targets, list):
            return list(self.targets)
        return [self.targets]


class _TakeProfitEventBase(_SignalEventBase):
    entry_price: float = Field(..., alias="entryPrice", gt=0)

    @property
    def exit_price(self) -> float:
        raise NotImplementedError

    @property
    def price_label(self) -> str:
        raise NotImplementedError


class TakeProfitEvent(_TakeProfitEventBase):
    """Intermediate target hit."""

    kind: Literal["tp"] = "tp"
    tp_price: float = Field(..., alias="tpPrice", gt=0)

    @property
    def exit_price(self) -> float:
        return self.tp_price

    @property
    def price_label(self) -> str:
        return "TP Price"


class FinalTakeProfitEvent(_TakeProfitEventBase):
    """Last target hit; the signal is finished afterwards."""

    kind: Literal["lastTp"] = "lastTp"
    final_tp_price: float = Field(..., alias="finalTpPrice", gt=0)

    @property
    def exit_price(self) -> float:
        return self.final_tp_price

    @property
    def price_label(self) -> str:
        return "Final TP Price"


class CloseEvent(_SignalEventBase):
    kind: Literal["close"] = "close"


SignalEvent = Annotated[
    Union[NewEntryEvent, TakeProfitEvent, FinalTakeProfitEvent, CloseEvent],
    Field(discriminator="kind"),
]

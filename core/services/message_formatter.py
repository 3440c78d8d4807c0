"""
Channel message rendering for signal events.

Pure functions only: symbol normalization, decimal-preserving price rendering,
TP profit math and Telegram MarkdownV2 escaping.
"""

import math
import re
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from core.domain.enums.signal_enums import SignalSide

# Fixed sizing policy used for the TP result posts
POSITION_SIZE = 100
LEVERAGE = 20

QUOTE_CURRENCY = "USDT"
PERP_SUFFIX = ".P"

# Upper bound of the suggested entry zone
SECOND_ENTRY_FACTOR = 1.01

_MARKDOWN_V2_RESERVED = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")
_LINK_URL_RESERVED = re.compile(r"([)\\])")


def normalize_symbol(raw: str) -> str:
    """
    'OMUSDT.P' -> 'OM/USDT', 'OM/USDT.P' -> 'OM/USDT', 'OMUSDT' -> 'OM/USDT'.

    Symbols without the USDT quote are split after the third character,
    which is wrong for bases that are not three letters long.
    """
    clean = (raw or "").strip().upper().replace(PERP_SUFFIX, "", 1)
    if "/" in clean:
        return clean
    if clean.endswith(QUOTE_CURRENCY):
        return clean[: clean.index(QUOTE_CURRENCY)] + "/" + QUOTE_CURRENCY
    return clean[:3] + "/" + clean[3:]


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def format_price(price: Any) -> Union[str, Any]:
    """
    Render a price with exactly the decimals of its shortest representation.
    7.53114 -> '7.53114', 7 -> '7', '7.50' -> '7.5'.
    Values that are not numbers come back unchanged.
    """
    number = _to_number(price)
    if number is None:
        return price
    if number.is_integer():
        return str(int(number))
    return format(Decimal(repr(number)), "f")


def price_decimals(formatted: Any) -> int:
    text = str(formatted)
    if "." not in text:
        return 0
    return len(text.split(".", 1)[1])


def compute_second_entry(entry_price: Any, decimals: int) -> Optional[str]:
    number = _to_number(entry_price)
    if number is None:
        return None
    return f"{number * SECOND_ENTRY_FACTOR:.{decimals}f}"


def compute_profit(
    side: Union[SignalSide, str],
    position_size: float,
    leverage: float,
    entry_price: float,
    exit_price: float,
) -> float:
    units = position_size * leverage / entry_price
    if str(getattr(side, "value", side)).lower() == SignalSide.LONG.value:
        return units * (exit_price - entry_price)
    return units * (entry_price - exit_price)


def escape_rich_text(text: Any) -> str:
    return _MARKDOWN_V2_RESERVED.sub(r"\\\1", str(text))


def _escape_link_url(url: str) -> str:
    return _LINK_URL_RESERVED.sub(r"\\\1", url)


def _side_label(side: Union[SignalSide, str]) -> str:
    if str(getattr(side, "value", side)).lower() == SignalSide.LONG.value:
        return "🟢 Long"
    return "🔴 SHORT"


def format_entry_message(
    side: Union[SignalSide, str],
    symbol: str,
    entry_price: Any,
    targets: Iterable[Any],
    stop_loss: Any,
    mention: Optional[str] = None,
) -> str:
    entry_str = format_price(entry_price)
    second_entry = compute_second_entry(entry_price, price_decimals(entry_str))
    if second_entry is None:
        entry_line = f"Entry : {entry_str}"
    else:
        entry_line = f"Entry : {entry_str} - {second_entry}"

    targets_block = "Targets :\n\n" + "".join(f"🎯 {t}\n" for t in targets)
    stop_line = f"🛑 Stop : {stop_loss}"

    text = (
        f"{_side_label(side)}\n\n"
        f"#{symbol}\n\n"
        f"{entry_line}\n\n\n"
        f"{targets_block}\n\n"
        f"{stop_line}"
    )
    if mention:
        text += f"\n\n\n{mention}"
    return text


def format_close_message(symbol: str, side: Union[SignalSide, str]) -> str:
    return f"#{symbol} #{getattr(side, 'value', side)}\nClose the Signal"


def format_promotion_message(
    side: Union[SignalSide, str],
    symbol: str,
    entry_price: float,
    exit_price: float,
    profit: float,
    label: str,
    link: str,
    mention: Optional[str] = None,
    position_size: float = POSITION_SIZE,
    leverage: float = LEVERAGE,
) -> str:
    """
    MarkdownV2 results post for a TP event. Every dynamic piece is escaped;
    the link target only escapes ')' and '\\' as Telegram requires.
    """
    side_text = escape_rich_text(str(getattr(side, "value", side)).upper())
    lines = [
        "🔥 *Trading Bot Results* 🔥\n\n",
        f"📊 *Results:* \\#{side_text} \\#{escape_rich_text(symbol)}\n",
        f"💰 *Entry Price:* `{escape_rich_text(f'{entry_price:.8f}')}`\n",
        f"🎯 *{escape_rich_text(label)}* `{escape_rich_text(f'{exit_price:.8f}')}`\n",
        f"📈 *Profit:* `{escape_rich_text(f'{profit:.8f}')}` USDT\n",
        f"📊 *Position Size:* `{escape_rich_text(format_price(position_size))}` USDT\n\n",
        f"📈 *Leverage:* {escape_rich_text(format_price(leverage))}x\n\n",
        "🚀 *Enjoy profit from the free automated trading bot\\!* \n",
        f"👉 Click the link, then [*START*]({_escape_link_url(link)})",
    ]
    if mention:
        lines.append(f"\n\n{escape_rich_text(mention)}")
    return "".join(lines)

"""Amount parsing and rendering for posting amounts.

Two grammars are recognized, tried in order:

1. Currency first: ``$100``, ``-$100``, ``$-100``, ``USD 100``,
   ``"US Dollar" 100.00``. Anything after the number (a lot price such as
   ``@ €0.90``, a balance assertion, ...) is tolerated and ignored.
2. Number first: ``100.50 USD``, ``-100.50 "US Dollar"``, ``100 €`` or a bare
   number, in which case the currency defaults to ``$``.

A ``-`` before the currency or directly before the digits marks the amount
as negative; two signs do not cancel out.

Values are :class:`decimal.Decimal` and rendering rounds half-up to exactly
two decimals with thousands separators.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .options import NegativeCommodityStyle

_NUMBER = r"\d+(?:,\d+)*(?:\.\d+)?"
# Quoted commodity names may contain anything but a quote; bare ones stop at
# digits, signs, dots, price/assertion markers, comments and whitespace.
_CURRENCY = r'"[^"]+"|[^\d\-+.@*;\t "{}=]+'

_CURRENCY_FIRST = re.compile(rf"(-)?({_CURRENCY})\s*(-)?({_NUMBER})(.*)", re.ASCII)
_NUMBER_FIRST = re.compile(rf"(-)?({_NUMBER})\s*({_CURRENCY})?", re.ASCII)

_SYMBOL_THEN_SIGN = re.compile(r"^([$€£¥])-(\d+(?:,\d+)*(?:\.\d+)?)(.*)$", re.ASCII)
_SIGN_THEN_SYMBOL = re.compile(r"^-([$€£¥])(\d+(?:,\d+)*(?:\.\d+)?)(.*)$", re.ASCII)

_FIRST_DIGIT = re.compile(r"[0-9]")
_CENT = Decimal("0.01")

DEFAULT_CURRENCY = "$"


@dataclass(frozen=True, slots=True)
class ParsedAmount:
    value: Decimal
    currency: str


def _parse_number(numeric: str) -> Decimal | None:
    # A lone comma followed by something other than a 3-digit group is a
    # decimal comma ("12,5"); otherwise commas group thousands ("1,250").
    if "," in numeric and "." not in numeric:
        head, _, tail = numeric.rpartition(",")
        if len(tail) != 3:
            numeric = f"{head.replace(',', '')}.{tail}"
    try:
        return Decimal(numeric.replace(",", ""))
    except InvalidOperation:
        return None


def parse_amount(text: str) -> ParsedAmount | None:
    """Extract ``(value, currency)`` from free-form amount text.

    Returns ``None`` when neither grammar matches.

    >>> parse_amount('-100.50 USD')
    ParsedAmount(value=Decimal('-100.50'), currency='USD')
    """

    trimmed = text.strip()

    match = _CURRENCY_FIRST.fullmatch(trimmed)
    if match is not None:
        sign_before, currency, sign_after, numeric, _rest = match.groups()
        value = _parse_number(numeric)
        if value is None:
            return None
        negative = sign_before == "-" or sign_after == "-"
        return ParsedAmount(value=-value if negative else value, currency=currency)

    match = _NUMBER_FIRST.fullmatch(trimmed)
    if match is not None:
        sign, numeric, currency = match.groups()
        value = _parse_number(numeric)
        if value is None:
            return None
        return ParsedAmount(
            value=-value if sign == "-" else value,
            currency=currency or DEFAULT_CURRENCY,
        )

    return None


def format_amount_value(
    value: Decimal | int | float,
    currency: str,
    style: NegativeCommodityStyle,
) -> str:
    """Render ``value`` with ``currency`` and the configured sign placement.

    ``signBeforeSymbol`` gives ``-$1,234.50``; ``symbolBeforeSign`` gives
    ``$-1,234.50``. Positive values never carry a sign.
    """

    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    number = f"{abs(amount).quantize(_CENT, rounding=ROUND_HALF_UP):,.2f}"
    if amount >= 0:
        return f"{currency}{number}"
    if style == "signBeforeSymbol":
        return f"-{currency}{number}"
    return f"{currency}-{number}"


def format_amount_with_style(amount: str | None, style: NegativeCommodityStyle) -> str | None:
    """Move the minus sign of a symbol-prefixed amount to match ``style``.

    Only single-character currency symbols directly attached to the number are
    rewritten; everything else, including any trailing price or assertion
    text, is returned untouched. Empty input yields ``None``.
    """

    if not amount:
        return None
    if style == "signBeforeSymbol":
        return _SYMBOL_THEN_SIGN.sub(r"-\1\2\3", amount, count=1)
    return _SIGN_THEN_SYMBOL.sub(r"\1-\2\3", amount, count=1)


def digits_prefix_length(amount: str) -> int:
    """Number of characters before the first digit (sign and symbol width)."""

    trimmed = amount.lstrip()
    match = _FIRST_DIGIT.search(trimmed)
    return len(trimmed) if match is None else match.start()


__all__ = [
    "DEFAULT_CURRENCY",
    "ParsedAmount",
    "digits_prefix_length",
    "format_amount_value",
    "format_amount_with_style",
    "parse_amount",
]

"""Formatter options value object and its best-effort normalizer.

``FormatterOptions`` is always fully populated. Callers (the CLI, an editor
host, tests) may hand the engine a partial mapping, a legacy bare column
number, or nothing at all; :func:`normalize_formatter_options` turns any of
those into a complete, validated instance. Invalid or out-of-type values are
silently replaced by the documented default for that field so a single bad
setting never blocks a format/sort/toggle call. Strict validation with error
reporting belongs to the configuration layer (see ``hledger_fmt.config``).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, get_args

type AmountAlignment = Literal["fixedColumn", "widest"]
type NegativeCommodityStyle = Literal["signBeforeSymbol", "symbolBeforeSign"]
type DateFormatStyle = Literal["YYYY-MM-DD", "YYYY/MM/DD", "YYYY.MM.DD"]
type CommentCharacter = Literal[";", "#", "*"]

AMOUNT_ALIGNMENTS: tuple[str, ...] = get_args(AmountAlignment.__value__)
NEGATIVE_COMMODITY_STYLES: tuple[str, ...] = get_args(NegativeCommodityStyle.__value__)
DATE_FORMATS: tuple[str, ...] = get_args(DateFormatStyle.__value__)
COMMENT_CHARACTERS: tuple[str, ...] = get_args(CommentCharacter.__value__)


@dataclass(frozen=True, slots=True)
class FormatterOptions:
    """Settings that drive formatting, comment toggling and balancing.

    Attributes
    ----------
    amount_column_position:
        Target column of an amount's first digit in ``fixedColumn`` mode.
    amount_alignment:
        ``"widest"`` aligns per transaction on its longest account;
        ``"fixedColumn"`` uses ``amount_column_position`` for the document.
    indentation_width:
        Number of spaces before every posting line.
    negative_commodity_style:
        ``"signBeforeSymbol"`` renders ``-$1.00``; ``"symbolBeforeSign"``
        renders ``$-1.00``.
    date_format:
        Output style for transaction header dates.
    comment_character:
        Character inserted when commenting lines out.
    """

    amount_column_position: int = 42
    amount_alignment: AmountAlignment = "widest"
    indentation_width: int = 4
    negative_commodity_style: NegativeCommodityStyle = "symbolBeforeSign"
    date_format: DateFormatStyle = "YYYY-MM-DD"
    comment_character: CommentCharacter = ";"


DEFAULT_FORMATTER_OPTIONS = FormatterOptions()

# Public option names as used by editor settings and config files, mapped to
# the dataclass attribute names.
_FIELD_ALIASES: dict[str, str] = {
    "amountColumnPosition": "amount_column_position",
    "amountAlignment": "amount_alignment",
    "indentationWidth": "indentation_width",
    "negativeCommodityStyle": "negative_commodity_style",
    "dateFormat": "date_format",
    "commentCharacter": "comment_character",
}
_FIELD_NAMES = frozenset(_FIELD_ALIASES.values())


def _coerce_non_negative_int(value: Any, default: int) -> int:
    # bool is an int subclass; a stray True must not become column 1.
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return max(0, math.floor(value))


def _coerce_choice(value: Any, allowed: tuple[str, ...], default: str) -> str:
    return value if isinstance(value, str) and value in allowed else default


def _as_field_mapping(raw: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key, value in raw.items():
        if not isinstance(key, str):
            continue
        name = _FIELD_ALIASES.get(key, key)
        if name in _FIELD_NAMES:
            fields[name] = value
    return fields


def normalize_formatter_options(
    value: FormatterOptions | Mapping[str, Any] | int | None = None,
) -> FormatterOptions:
    """Return a fully-populated :class:`FormatterOptions`.

    Accepted inputs
    ---------------
    - ``None``: the defaults.
    - ``int``: legacy shorthand for ``amount_column_position``.
    - ``Mapping``: partial options keyed by either the camelCase setting
      names (``amountAlignment``) or the snake_case attribute names
      (``amount_alignment``). Unknown keys are ignored.
    - ``FormatterOptions``: re-validated field by field.

    Any field whose value has the wrong type or is outside its allowed set is
    replaced by its default; nothing is raised.
    """

    defaults = DEFAULT_FORMATTER_OPTIONS
    if value is None:
        return defaults
    if isinstance(value, FormatterOptions):
        raw: dict[str, Any] = {name: getattr(value, name) for name in _FIELD_NAMES}
    elif isinstance(value, int) and not isinstance(value, bool):
        raw = {"amount_column_position": value}
    elif isinstance(value, Mapping):
        raw = _as_field_mapping(value)
    else:
        return defaults

    return FormatterOptions(
        amount_column_position=_coerce_non_negative_int(
            raw.get("amount_column_position"), defaults.amount_column_position
        ),
        amount_alignment=_coerce_choice(
            raw.get("amount_alignment"), AMOUNT_ALIGNMENTS, defaults.amount_alignment
        ),
        indentation_width=_coerce_non_negative_int(
            raw.get("indentation_width"), defaults.indentation_width
        ),
        negative_commodity_style=_coerce_choice(
            raw.get("negative_commodity_style"),
            NEGATIVE_COMMODITY_STYLES,
            defaults.negative_commodity_style,
        ),
        date_format=_coerce_choice(raw.get("date_format"), DATE_FORMATS, defaults.date_format),
        comment_character=_coerce_choice(
            raw.get("comment_character"), COMMENT_CHARACTERS, defaults.comment_character
        ),
    )


__all__ = [
    "AMOUNT_ALIGNMENTS",
    "COMMENT_CHARACTERS",
    "DATE_FORMATS",
    "DEFAULT_FORMATTER_OPTIONS",
    "NEGATIVE_COMMODITY_STYLES",
    "AmountAlignment",
    "CommentCharacter",
    "DateFormatStyle",
    "FormatterOptions",
    "NegativeCommodityStyle",
    "normalize_formatter_options",
]

"""Option resolution for the command-line interface.

Precedence, highest first:

1. Command-line flags.
2. Environment variables (``HLEDGER_FMT_*``; a ``.env`` in the working
   directory is loaded by the CLI without overriding the real environment).
3. The config file: ``--config PATH`` or ``.hledger-fmt.toml`` in the
   working directory.
4. Built-in defaults.

Flags and environment variables are merged by Typer (each option declares
its ``envvar``); this module layers the config file and defaults underneath.
Unlike the engine's own normalizer, the config file is validated strictly
and problems are reported to the user.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .logging_setup import get_logger
from .options import (
    AmountAlignment,
    CommentCharacter,
    DateFormatStyle,
    FormatterOptions,
    NegativeCommodityStyle,
    normalize_formatter_options,
)

_logger = get_logger("hledger_fmt.config")

DEFAULT_CONFIG_FILENAME = ".hledger-fmt.toml"

ENV_AMOUNT_ALIGNMENT = "HLEDGER_FMT_AMOUNT_ALIGNMENT"
ENV_AMOUNT_COLUMN = "HLEDGER_FMT_AMOUNT_COLUMN"
ENV_INDENT = "HLEDGER_FMT_INDENT"
ENV_NEGATIVE_STYLE = "HLEDGER_FMT_NEGATIVE_STYLE"
ENV_DATE_FORMAT = "HLEDGER_FMT_DATE_FORMAT"
ENV_COMMENT_CHAR = "HLEDGER_FMT_COMMENT_CHAR"


class ConfigError(Exception):
    """The config file could not be read or failed validation."""


class FormatterConfigFile(BaseModel):
    """Schema of ``.hledger-fmt.toml``.

    Keys use the editor setting names; every key is optional::

        amountAlignment = "fixedColumn"
        amountColumnPosition = 50
        indentationWidth = 2
        negativeCommodityStyle = "signBeforeSymbol"
        dateFormat = "YYYY/MM/DD"
        commentCharacter = "#"

    The same keys may instead live under a ``[hledger-fmt]`` table.
    """

    model_config = ConfigDict(strict=True, extra="forbid", populate_by_name=True)

    amount_column_position: int | None = Field(default=None, ge=0, alias="amountColumnPosition")
    amount_alignment: AmountAlignment | None = Field(default=None, alias="amountAlignment")
    indentation_width: int | None = Field(default=None, ge=0, alias="indentationWidth")
    negative_commodity_style: NegativeCommodityStyle | None = Field(
        default=None, alias="negativeCommodityStyle"
    )
    date_format: DateFormatStyle | None = Field(default=None, alias="dateFormat")
    comment_character: CommentCharacter | None = Field(default=None, alias="commentCharacter")

    def as_overrides(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def find_config_file(explicit: Path | None = None, cwd: Path | None = None) -> Path | None:
    """Return the config file to use, or ``None``.

    An explicit path must exist; the implicit one is optional.
    """

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"config file not found: {explicit}")
        return explicit
    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config_file(path: Path) -> FormatterConfigFile:
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc

    section = data.get("hledger-fmt", data)
    if not isinstance(section, Mapping):
        raise ConfigError(f"[hledger-fmt] in {path} must be a table")
    try:
        return FormatterConfigFile.model_validate(dict(section))
    except ValidationError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc


def resolve_formatter_options(
    flags: Mapping[str, Any] | None = None,
    *,
    config_path: Path | None = None,
    cwd: Path | None = None,
) -> FormatterOptions:
    """Merge flag/env values over the config file over defaults.

    ``flags`` holds snake_case field names; ``None`` values mean "not given"
    and fall through to the next layer.
    """

    merged: dict[str, Any] = {}
    path = find_config_file(config_path, cwd)
    if path is not None:
        merged.update(load_config_file(path).as_overrides())
        _logger.debug("loaded config from %s", path)

    given = {k: v for k, v in (flags or {}).items() if v is not None}
    try:
        merged.update(FormatterConfigFile.model_validate(given).as_overrides())
    except ValidationError as exc:
        raise ConfigError(f"invalid option: {exc}") from exc
    return normalize_formatter_options(merged)


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "ConfigError",
    "FormatterConfigFile",
    "find_config_file",
    "load_config_file",
    "resolve_formatter_options",
]

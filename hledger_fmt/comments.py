"""Smart-block comment toggling over a line range.

The whole selection is treated as one block. If any non-blank line in it is
not commented yet, every uncommented line gets the configured comment
character (already commented lines are left alone, whichever of ``;``,
``#`` or ``*`` they use). Only when every non-blank line is commented is the
block uncommented. Blank lines are never touched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .lines import is_blank_line, parse_comment_line, split_lines
from .options import FormatterOptions, normalize_formatter_options


def _selected_indices(start_line: int, end_line: int, line_count: int) -> range:
    # Line numbers are 0-based and inclusive; out-of-range parts are ignored.
    return range(max(0, start_line), min(end_line, line_count - 1) + 1)


def toggle_comment_lines(
    text: str,
    start_line: int,
    end_line: int,
    options: FormatterOptions | Mapping[str, Any] | int | None = None,
) -> str:
    """Comment or uncomment lines ``start_line..end_line`` (0-based, inclusive)."""

    opts = normalize_formatter_options(options)
    lines, newline = split_lines(text)
    selected = _selected_indices(start_line, end_line, len(lines))

    has_uncommented = any(
        parse_comment_line(lines[i]) is None for i in selected if not is_blank_line(lines[i])
    )

    for i in selected:
        line = lines[i]
        if is_blank_line(line):
            continue
        parsed = parse_comment_line(line)
        if has_uncommented:
            if parsed is None:
                content = line.lstrip()
                indent = line[: len(line) - len(content)]
                lines[i] = f"{indent}{opts.comment_character} {content}"
        elif parsed is not None:
            lines[i] = f"{parsed.leading_whitespace}{parsed.content}"

    return newline.join(lines)


__all__ = ["toggle_comment_lines"]

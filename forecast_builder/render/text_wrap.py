"""Greedy pixel-width line wrapping."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 4
MAX_LINES_LIMIT = 10


def wrap_text(
    text: str,
    measure: Callable[[str], float],
    max_width: float,
    max_lines: int,
) -> list[str]:
    """Split text into lines no wider than max_width pixels.

    Walks back from the end of the remaining text to the last space whose
    prefix fits, emits that prefix, and continues after the space. A token
    with no usable space is hard-broken at the widest prefix that fits (at
    least one character), so every pass consumes input. Text left over
    after max_lines lines is dropped.
    """
    if max_lines < 1 or max_lines > MAX_LINES_LIMIT:
        logger.info("wrap_text: max_lines out of range (%d), using %d", max_lines, DEFAULT_MAX_LINES)
        max_lines = DEFAULT_MAX_LINES

    lines: list[str] = []
    remaining = text

    while remaining:
        if measure(remaining) <= max_width:
            lines.append(remaining)
            break

        line, remaining = _split_once(remaining, measure, max_width)
        lines.append(line)

        if len(lines) >= max_lines:
            break

    return lines


def _split_once(
    text: str, measure: Callable[[str], float], max_width: float
) -> tuple[str, str]:
    index = len(text) - 1
    while index > 0:
        if text[index] == " " and measure(text[:index]) <= max_width:
            return text[:index], text[index + 1:]
        index -= 1

    # No space gives a fitting prefix; break inside the first token
    end = 1
    while end < len(text) and measure(text[: end + 1]) <= max_width:
        end += 1
    return text[:end], text[end:].lstrip(" ")

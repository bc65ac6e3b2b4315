"""Normalization of upstream game status values."""

from dataclasses import dataclass
from typing import Any, Optional

from .constants import (
    STATE_UNKNOWN,
    STATUS_EXACT_TOKENS,
    STATUS_SUBSTRINGS,
    STATUS_TYPE_CODES,
)


@dataclass(frozen=True)
class GameStatus:
    """Normalized game status."""
    state: str = STATE_UNKNOWN
    detail: Optional[str] = None
    period: Optional[int] = None
    clock: Optional[str] = None


def _type_code(value: Any) -> Optional[int]:
    """Parse a numeric status code given as int or digit string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _state_from_text(text: str) -> str:
    """Match a lowercase state string against exact tokens, then substrings."""
    if text in STATUS_EXACT_TOKENS:
        return STATUS_EXACT_TOKENS[text]
    for needle, state in STATUS_SUBSTRINGS:
        if needle in text:
            return state
    return STATE_UNKNOWN


def _first_text(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return None


def normalize_status(status: Any, detail: Optional[str] = None) -> GameStatus:
    """
    Map an upstream status value onto the closed set of game states.

    Accepts a bare string ('final', 'STATUS_IN_PROGRESS', 'post'), an
    ESPN-style object ({'type': {'id': '3', 'state': 'post', ...}}), or an
    already-normalized {'state': ..., 'detail': ...} dict.

    Resolution order:
        1. Numeric type code (1=scheduled, 2=in_progress, 3=final)
        2. Exact state token (pre, in, live, post, final, scheduled, ...)
        3. Substring containment

    Args:
        status: Raw status value
        detail: Free-text detail for flat records that carry it separately

    Returns:
        GameStatus; state is 'unknown' when nothing matched
    """
    if isinstance(status, GameStatus):
        return status

    if isinstance(status, str):
        state = _state_from_text(status.strip().lower())
        return GameStatus(state=state, detail=detail)

    if not isinstance(status, dict):
        return GameStatus(detail=detail)

    status_type = status.get('type')
    if not isinstance(status_type, dict):
        # Older feeds put the type name directly on status.type
        status_type = {'name': status_type} if isinstance(status_type, str) else {}

    detail = _first_text(
        status_type.get('shortDetail'),
        status_type.get('detail'),
        status_type.get('description'),
        status.get('shortDetail'),
        status.get('detail'),
        detail,
    )
    period = status.get('period')
    clock = status.get('displayClock') or status.get('clock')
    extras = {
        'detail': detail,
        'period': period if isinstance(period, int) else None,
        'clock': str(clock) if clock is not None else None,
    }

    code = _type_code(status_type.get('id'))
    if code is None:
        code = _type_code(status.get('id'))
    if code in STATUS_TYPE_CODES:
        return GameStatus(state=STATUS_TYPE_CODES[code], **extras)

    text = _first_text(
        status_type.get('state'),
        status.get('state'),
        status_type.get('name'),
    )
    if text is None:
        return GameStatus(**extras)

    return GameStatus(state=_state_from_text(text.strip().lower()), **extras)

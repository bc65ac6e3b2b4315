"""Round classification and multiplier resolution."""

import re
from typing import Optional, Tuple

from .constants import (
    BRIER_BUCKETS,
    GROUP_KEYWORDS,
    GROUP_STAGE,
    KNOCKOUT_KEYWORDS,
    KNOCKOUT_ROUND,
    MEDAL_KEYWORDS,
    MEDAL_ROUND,
    MODE_BRIER,
    OVERTIME,
    PLAYOFF,
    ROUND_TYPES,
    SHOOTOUT,
)
from .models import Game
from .schemas import ScoringConfig

_SHOOTOUT_TOKEN = re.compile(r'(^|[^a-z])so([^a-z]|$)')
_OVERTIME_TOKEN = re.compile(r'(^|[^a-z])ot([^a-z]|$)')


def classify_round(game: Game, config: Optional[ScoringConfig] = None) -> str:
    """
    Determine which round bucket a game belongs to.

    Priority:
        1. Explicit round hint
        2. Keywords in the season-type / event name (configured mappings first)
        3. Scheduled on or after the configured knockout cutoff
        4. Group stage

    A mis-tagged name will misclassify silently; later stages only run when
    earlier ones are inconclusive.
    """
    if game.round_hint in ROUND_TYPES:
        return game.round_hint

    name = (game.round_name or game.name or '').lower()

    if config is not None:
        for keyword, round_type in config.round_keywords.items():
            if keyword.lower() in name:
                return round_type

    if any(k in name for k in MEDAL_KEYWORDS):
        return MEDAL_ROUND
    if any(k in name for k in KNOCKOUT_KEYWORDS):
        return KNOCKOUT_ROUND
    if any(k in name for k in GROUP_KEYWORDS):
        return GROUP_STAGE

    cutoff = config.knockout_cutoff if config is not None else None
    if cutoff is not None and game.scheduled_at is not None and game.scheduled_at >= cutoff:
        return KNOCKOUT_ROUND

    return GROUP_STAGE


def detect_overtime(detail: Optional[str]) -> Optional[str]:
    """
    Detect an overtime or shootout finish from status detail text.

    'Final/SO' and 'Shootout' are shootouts; 'Final/OT', '2OT' and
    'Overtime' are overtime. Shootout wins when both could match.

    Returns:
        'shootout', 'overtime', or None for regulation / no detail
    """
    if not detail:
        return None
    text = str(detail).lower()
    if 'shootout' in text or _SHOOTOUT_TOKEN.search(text):
        return SHOOTOUT
    if 'overtime' in text or _OVERTIME_TOKEN.search(text):
        return OVERTIME
    return None


def resolve_multiplier(
    round_type: str, detail: Optional[str], config: ScoringConfig
) -> Tuple[float, Optional[str], bool]:
    """
    Resolve the scoring multiplier for a round and finish.

    Classic mode uses the flat per-round points and ignores overtime.
    Brier mode collapses rounds to groupStage/playoff; an OT or shootout
    finish uses the overtime multiplier instead of the regulation one.

    Returns:
        Tuple of (multiplier, overtime_kind, overtime_applied)
    """
    overtime_kind = detect_overtime(detail)

    if config.mode != MODE_BRIER:
        return config.points.for_round(round_type), overtime_kind, False

    bucket = BRIER_BUCKETS.get(round_type, GROUP_STAGE)
    brier = config.brier

    if overtime_kind:
        ot = brier.overtime_multipliers
        return (ot.playoff if bucket == PLAYOFF else ot.group_stage), overtime_kind, True

    if brier.base_multipliers is None:
        # Without explicit Brier multipliers the classic round points double as multipliers
        return config.points.for_round(round_type), None, False

    base = brier.base_multipliers
    return (base.playoff if bucket == PLAYOFF else base.group_stage), None, False

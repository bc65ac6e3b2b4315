"""Pick scoring: Brier confidence points and classic flat points."""

import math
from typing import Any, Dict, Optional

from .config import coerce_config
from .constants import (
    DEFAULT_CONFIDENCE,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    MODE_BRIER,
    REASON_MISSING_SCORES,
    REASON_NOT_STARTED,
    STATE_FINAL,
    STATE_IN_PROGRESS,
)
from .models import Game, Pick, PickScoreResult
from .results import resolve_result
from .rounds import classify_round, resolve_multiplier
from .schemas import ScoringConfig


def clamp_confidence(confidence: Any) -> float:
    """
    Clamp a confidence value into [0.5, 1.0].

    Missing, non-numeric and NaN values count as a toss-up (0.5).
    """
    try:
        value = float(confidence)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if math.isnan(value):
        return DEFAULT_CONFIDENCE
    return min(max(value, MIN_CONFIDENCE), MAX_CONFIDENCE)


def brier_points(
    is_correct: bool,
    confidence: Any,
    multiplier: float,
    config: Optional[ScoringConfig | dict] = None,
) -> float:
    """
    Score a pick with the Brier rule.

    Scoring:
        points = multiplier * (base - scale * (outcome - confidence)^2)

        - outcome is 1 for a correct pick, 0 otherwise
        - confidence 0.5 always scores 0, right or wrong
        - confidence 1.0 scores +base when right, base - scale when wrong
          (-75 with the default 25/100)
        - the multiplier scales the penalty as well as the reward

    Returns:
        Points rounded to 2 decimal places
    """
    brier = coerce_config(config).brier
    outcome = 1.0 if is_correct else 0.0
    conf = clamp_confidence(confidence)
    points = multiplier * (brier.base - brier.multiplier * (outcome - conf) ** 2)
    # Normalize -0.0 so serialized output is stable
    return round(points, 2) + 0.0


def compare_exact_scores(pick: Pick, game: Game) -> bool:
    """Check if predicted scores match actual scores exactly."""
    return pick.predicted_score_a == game.score_a and pick.predicted_score_b == game.score_b


def _neutral(game_id: str, reason: str, **details: Any) -> PickScoreResult:
    return PickScoreResult(game_id=game_id, details={'reason': reason, **details})


def score_pick(
    pick: Pick,
    game: Game,
    config: Optional[ScoringConfig | dict] = None,
) -> PickScoreResult:
    """
    Score one pick against one game.

    Games that haven't started, or have no scores yet, give a zero-point
    result with a reason in details. In-progress games are scored
    provisionally against the live score; callers decide whether to count
    them.

    Args:
        pick: Player's pick
        game: Game with actual scores and normalized status
        config: Scoring configuration (defaults if None)

    Returns:
        PickScoreResult with points and a details audit trail
    """
    config = coerce_config(config)
    game_id = game.id or pick.game_id
    state = game.status.state

    if state not in (STATE_FINAL, STATE_IN_PROGRESS):
        return _neutral(game_id, REASON_NOT_STARTED, state=state)

    if game.score_a is None or game.score_b is None:
        return _neutral(game_id, REASON_MISSING_SCORES, state=state)

    actual_result = resolve_result(game.score_a, game.score_b)
    round_type = classify_round(game, config)
    multiplier, overtime, overtime_applied = resolve_multiplier(
        round_type, game.status.detail, config
    )

    predicted_result = pick.predicted_result
    is_correct = predicted_result is not None and predicted_result == actual_result

    details: Dict[str, Any] = {
        'mode': config.mode,
        'round': round_type,
        'multiplier': multiplier,
        'overtime': overtime,
        'overtime_applied': overtime_applied,
        'provisional': state == STATE_IN_PROGRESS,
        'predicted_result': predicted_result,
        'actual_result': actual_result,
        'predicted_scores': {'team_a': pick.predicted_score_a, 'team_b': pick.predicted_score_b},
        'actual_scores': {'team_a': game.score_a, 'team_b': game.score_b},
        'exact_score': False,
    }

    if config.mode == MODE_BRIER:
        confidence = clamp_confidence(pick.confidence)
        details['confidence'] = confidence
        points = brier_points(is_correct, confidence, multiplier, config)
        return PickScoreResult(
            game_id=game_id,
            is_correct=is_correct,
            base_points=points,
            total_points=points,
            details=details,
        )

    if not is_correct:
        return PickScoreResult(game_id=game_id, details=details)

    base_points = multiplier
    bonus_points = 0.0
    if config.exact_score_bonus.enabled and compare_exact_scores(pick, game):
        bonus_points = config.exact_score_bonus.points
        details['exact_score'] = True

    return PickScoreResult(
        game_id=game_id,
        is_correct=True,
        base_points=base_points,
        bonus_points=bonus_points,
        total_points=base_points + bonus_points,
        details=details,
    )

"""Data models for the pickscore engine."""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from .constants import ROUND_TYPES
from .results import resolve_result
from .status import GameStatus, normalize_status

logger = logging.getLogger('pickscore.models')


def parse_int(value: Any) -> Optional[int]:
    """Parse an int from an int, float or numeric string; None if not possible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 instant. Naive values are taken as UTC."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _first(record: dict, *keys: str) -> Any:
    """Return the first non-None value among keys."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _team_name(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        value = value.get('name') or value.get('displayName') or value.get('abbreviation')
    return str(value) if value else None


@dataclass(frozen=True)
class Game:
    """A contest between team A (away) and team B (home)."""
    id: str
    status: GameStatus = field(default_factory=GameStatus)
    scheduled_at: Optional[datetime] = None
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    round_hint: Optional[str] = None
    round_name: Optional[str] = None
    name: Optional[str] = None
    short_name: Optional[str] = None
    team_a: Optional[str] = None
    team_b: Optional[str] = None

    @property
    def state(self) -> str:
        return self.status.state

    @classmethod
    def from_dict(cls, record: dict) -> 'Game':
        """
        Build a Game from any of the known record shapes.

        Handles ESPN-normalized games ({'espnEventId', 'scores': {'teamA'}}),
        flat API rows ({'game_id', 'score_a', 'status', 'status_detail'})
        and stored rows ({'game_espn_id', 'round_type'}).
        """
        game_id = _first(record, 'espnEventId', 'id', 'game_id', 'game_espn_id')

        scores = record.get('scores')
        if isinstance(scores, dict):
            score_a = parse_int(scores.get('teamA'))
            score_b = parse_int(scores.get('teamB'))
        else:
            score_a = parse_int(_first(record, 'score_a', 'scoreA'))
            score_b = parse_int(_first(record, 'score_b', 'scoreB'))

        status = normalize_status(
            record.get('status'), _first(record, 'status_detail', 'statusDetail')
        )

        round_hint = _first(record, 'roundType', 'round_type', 'roundHint')
        if round_hint not in ROUND_TYPES:
            round_hint = None

        return cls(
            id=str(game_id) if game_id is not None else '',
            status=status,
            scheduled_at=parse_datetime(_first(record, 'scheduledAt', 'scheduled_at', 'date')),
            score_a=score_a,
            score_b=score_b,
            round_hint=round_hint,
            round_name=_first(record, 'roundName', 'round_name', 'seasonType'),
            name=record.get('name'),
            short_name=_first(record, 'shortName', 'short_name'),
            team_a=_team_name(_first(record, 'teamA', 'team_a')),
            team_b=_team_name(_first(record, 'teamB', 'team_b')),
        )


@dataclass(frozen=True)
class Pick:
    """A player's prediction for one game."""
    player_id: str
    game_id: str
    predicted_score_a: int = 0
    predicted_score_b: int = 0
    confidence: Optional[float] = None
    explicit_result: Optional[str] = None
    team_a: Optional[str] = None  # submitted team names, checked by validate_picks
    team_b: Optional[str] = None

    @property
    def predicted_result(self) -> Optional[str]:
        """Explicit predicted result if present, else derived from predicted scores."""
        return self.explicit_result or resolve_result(self.predicted_score_a, self.predicted_score_b)

    @classmethod
    def from_dict(cls, record: dict, player_id: str = '') -> 'Pick':
        """Build a Pick from client, API or stored row shapes."""
        game_id = _first(record, 'gameId', 'game_id', 'game_espn_id')
        score_a = parse_int(
            _first(record, 'teamAScore', 'team_a_score', 'predicted_team_a_score', 'predictedScoreA')
        )
        score_b = parse_int(
            _first(record, 'teamBScore', 'team_b_score', 'predicted_team_b_score', 'predictedScoreB')
        )

        confidence = record.get('confidence')
        try:
            confidence = float(confidence) if confidence is not None else None
        except (TypeError, ValueError):
            confidence = None

        return cls(
            player_id=str(_first(record, 'playerId', 'player_id', 'user_id') or player_id),
            game_id=str(game_id) if game_id is not None else '',
            predicted_score_a=max(score_a or 0, 0),
            predicted_score_b=max(score_b or 0, 0),
            confidence=confidence,
            explicit_result=_first(record, 'predictedResult', 'predicted_result'),
            team_a=_team_name(_first(record, 'teamA', 'team_a', 'submitted_team_a_name')),
            team_b=_team_name(_first(record, 'teamB', 'team_b', 'submitted_team_b_name')),
        )


@dataclass(frozen=True)
class Player:
    """A pool participant and their submitted picks."""
    id: str
    name: str
    display_order: Optional[int] = None
    picks: Tuple[Pick, ...] = ()

    @classmethod
    def from_dict(cls, record: dict) -> 'Player':
        player_id = str(_first(record, 'id', 'playerId', 'player_id') or '')
        picks = []
        for entry in record.get('picks') or []:
            if isinstance(entry, Pick):
                picks.append(entry)
            elif isinstance(entry, Mapping):
                picks.append(Pick.from_dict(entry, player_id))
            else:
                logger.warning(f'Skipping malformed pick for player {player_id!r}: {entry!r}')
        return cls(
            id=player_id,
            name=record.get('name') or record.get('email') or 'Unknown Player',
            display_order=parse_int(_first(record, 'displayOrder', 'display_order')),
            picks=tuple(picks),
        )


@dataclass(frozen=True)
class PickScoreResult:
    """Scoring outcome for one pick; details is the audit trail."""
    game_id: str
    is_correct: bool = False
    base_points: float = 0.0
    bonus_points: float = 0.0
    total_points: float = 0.0
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RoundStats:
    """Per-round correct/total/points tallies."""
    correct: int = 0
    total: int = 0
    points: float = 0.0


@dataclass(frozen=True)
class PlayerScoreSummary:
    """A player's aggregated score. rank is set only by the ranker."""
    player_id: str
    player_name: str
    total_points: float = 0.0
    correct_picks: int = 0
    total_picks: int = 0
    scored_games: int = 0
    accuracy: str = '0.0'
    round_breakdown: Dict[str, RoundStats] = field(default_factory=dict)
    pick_results: Tuple[PickScoreResult, ...] = ()
    display_order: Optional[int] = None
    rank: Optional[int] = None

    def to_dict(self, include_picks: bool = False) -> dict[str, Any]:
        data = asdict(self)
        if not include_picks:
            data.pop('pick_results')
        return data


@dataclass(frozen=True)
class TournamentProgress:
    """Completion counts across the schedule."""
    total_games: int = 0
    completed_games: int = 0
    in_progress_games: int = 0
    percent_complete: str = '0.0'

"""Tournament payload: games with pick visibility, leaderboard and progress.

Everything here is JSON-ready plain data with snake_case keys, for API
handlers and the CLI to serialize.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from .config import coerce_config
from .constants import STATE_FINAL, STATE_IN_PROGRESS, STATE_SCHEDULED, STATE_UNKNOWN
from .leaderboard import build_leaderboard, format_percent
from .models import Game, Pick, Player, TournamentProgress
from .results import resolve_result
from .rounds import classify_round
from .schemas import ScoringConfig
from .scoring import score_pick


def tournament_progress(games: Iterable[Game]) -> TournamentProgress:
    """Count completed and in-progress games."""
    games = list(games)
    completed = sum(1 for g in games if g.status.state == STATE_FINAL)
    in_progress = sum(1 for g in games if g.status.state == STATE_IN_PROGRESS)
    return TournamentProgress(
        total_games=len(games),
        completed_games=completed,
        in_progress_games=in_progress,
        percent_complete=format_percent(completed, len(games)),
    )


def has_started(game: Game, now: datetime) -> bool:
    """Picks become visible once the game is under way or past its start time."""
    if game.status.state in (STATE_FINAL, STATE_IN_PROGRESS):
        return True
    return game.scheduled_at is not None and game.scheduled_at <= now


def enrich_games_with_picks(
    games: Iterable[Game],
    players: Iterable[Player],
    config: Optional[ScoringConfig | dict] = None,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """
    Attach each player's pick to the game it is for.

    Before a game starts only the fact that a pick was submitted is shown.
    After it starts the predicted scores and confidence are visible; points
    are filled in once the game is final.

    Args:
        games: Games to display
        players: Players with picks
        config: Scoring configuration (defaults if None)
        now: Reference time for visibility (defaults to current UTC time)

    Returns:
        List of game dicts with a 'picks' list and a 'picks_visible' flag
    """
    config = coerce_config(config)
    now = now or datetime.now(timezone.utc)

    picks_by_game: dict[str, list[tuple[Player, Pick]]] = {}
    for player in players:
        for pick in player.picks:
            picks_by_game.setdefault(pick.game_id, []).append((player, pick))

    enriched = []
    for game in games:
        visible = has_started(game, now)
        is_final = game.status.state == STATE_FINAL
        game_picks = picks_by_game.get(game.id, [])

        if visible:
            picks = []
            for player, pick in game_picks:
                result = score_pick(pick, game, config) if is_final else None
                picks.append(
                    {
                        'player_id': player.id,
                        'player_name': player.name,
                        'predicted_score_a': pick.predicted_score_a,
                        'predicted_score_b': pick.predicted_score_b,
                        'predicted_result': pick.predicted_result,
                        'confidence': pick.confidence,
                        'is_correct': bool(result and result.is_correct),
                        'points_earned': result.total_points if result else 0,
                    }
                )
        else:
            picks = [
                {'player_id': player.id, 'player_name': player.name, 'submitted': True}
                for player, _ in game_picks
            ]

        enriched.append(
            {
                'id': game.id,
                'name': game.name,
                'short_name': game.short_name,
                'scheduled_at': game.scheduled_at.isoformat() if game.scheduled_at else None,
                'status': game.status.state if game.status.state != STATE_UNKNOWN else STATE_SCHEDULED,
                'status_detail': game.status.detail,
                'status_period': game.status.period,
                'status_clock': game.status.clock,
                'round_type': classify_round(game, config),
                'score_a': game.score_a,
                'score_b': game.score_b,
                'result': resolve_result(game.score_a, game.score_b),
                'team_a': game.team_a,
                'team_b': game.team_b,
                'picks': picks,
                'picks_visible': visible,
                'has_all_picks': len(game_picks) > 0,
            }
        )

    return enriched


def build_tournament_data(
    games: Iterable[Game],
    players: Iterable[Player | dict],
    config: Optional[ScoringConfig | dict] = None,
    now: Optional[datetime] = None,
    include_live: bool = False,
) -> dict[str, Any]:
    """
    Build the combined games + leaderboard + progress document.

    Returns:
        {'games': [...], 'leaderboard': [...], 'tournament_progress': {...}, 'timestamp': str}
    """
    config = coerce_config(config)
    now = now or datetime.now(timezone.utc)
    games = list(games)
    players = [
        Player.from_dict(p) if isinstance(p, Mapping) else p
        for p in players
        if isinstance(p, (Player, Mapping))
    ]

    leaderboard = build_leaderboard(players, games, config, include_live=include_live)

    return {
        'games': enrich_games_with_picks(games, players, config, now),
        'leaderboard': [summary.to_dict() for summary in leaderboard],
        'tournament_progress': asdict(tournament_progress(games)),
        'timestamp': now.isoformat(),
    }

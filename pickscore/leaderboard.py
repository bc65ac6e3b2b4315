"""Player aggregation and leaderboard ranking."""

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Optional

from .config import coerce_config
from .constants import (
    REASON_GAME_NOT_FOUND,
    ROUND_TYPES,
    STATE_FINAL,
    STATE_IN_PROGRESS,
)
from .models import Game, Pick, PickScoreResult, Player, PlayerScoreSummary, RoundStats
from .schemas import ScoringConfig
from .scoring import score_pick

logger = logging.getLogger('pickscore.leaderboard')


def index_games(games: Iterable[Game] | Mapping[str, Game]) -> dict[str, Game]:
    """Build a game lookup by id."""
    if isinstance(games, Mapping):
        return dict(games)
    return {game.id: game for game in games}


def is_scoreable(game: Game, include_live: bool = False) -> bool:
    """Whether a game counts toward totals: final, or live when include_live is set."""
    if game.status.state == STATE_FINAL:
        return True
    return include_live and game.status.state == STATE_IN_PROGRESS


def format_percent(numerator: int, denominator: int) -> str:
    """Percentage with one decimal; '0.0' when the denominator is zero."""
    if denominator <= 0:
        return '0.0'
    return f'{numerator / denominator * 100:.1f}'


def aggregate_player(
    picks: Iterable[Pick],
    games: Iterable[Game] | Mapping[str, Game],
    config: Optional[ScoringConfig | dict] = None,
    *,
    player_id: str = '',
    player_name: str = '',
    display_order: Optional[int] = None,
    include_live: bool = False,
) -> PlayerScoreSummary:
    """
    Calculate a player's totals across all their picks.

    Picks for unknown games are kept in pick_results with a 'Game not found'
    reason but don't count. Only final games (plus in-progress games when
    include_live is set) count toward points, accuracy and the round
    breakdown.

    Args:
        picks: The player's picks
        games: Games as a list or an id -> Game mapping
        config: Scoring configuration (defaults if None)
        player_id: Opaque player identifier
        player_name: Display name
        display_order: Optional manifest position
        include_live: Count provisional points from in-progress games

    Returns:
        PlayerScoreSummary without a rank
    """
    config = coerce_config(config)
    game_map = index_games(games)
    picks = list(picks)

    pick_results: list[PickScoreResult] = []
    total_points = 0.0
    correct_picks = 0
    scored_games = 0
    tallies = {round_type: [0, 0, 0.0] for round_type in ROUND_TYPES}

    for pick in picks:
        game = game_map.get(pick.game_id)
        if game is None:
            logger.warning(f'Pick for unknown game {pick.game_id!r} (player {player_id or player_name})')
            pick_results.append(
                PickScoreResult(game_id=pick.game_id, details={'reason': REASON_GAME_NOT_FOUND})
            )
            continue

        result = score_pick(pick, game, config)
        pick_results.append(result)

        if not is_scoreable(game, include_live) or 'reason' in result.details:
            continue

        scored_games += 1
        total_points += result.total_points
        if result.is_correct:
            correct_picks += 1

        tally = tallies.get(result.details['round'])
        if tally is not None:
            tally[1] += 1
            tally[2] += result.total_points
            if result.is_correct:
                tally[0] += 1

    return PlayerScoreSummary(
        player_id=player_id,
        player_name=player_name,
        display_order=display_order,
        total_points=round(total_points, 2) + 0.0,
        correct_picks=correct_picks,
        total_picks=len(picks),
        scored_games=scored_games,
        accuracy=format_percent(correct_picks, scored_games),
        round_breakdown={
            round_type: RoundStats(correct=c, total=t, points=round(p, 2) + 0.0)
            for round_type, (c, t, p) in tallies.items()
        },
        pick_results=tuple(pick_results),
    )


def _sort_key(summary: PlayerScoreSummary):
    return (
        -summary.total_points,
        -summary.correct_picks,
        summary.player_name.casefold(),
        summary.player_name,
        summary.player_id,
    )


def rank_players(summaries: Iterable[PlayerScoreSummary]) -> list[PlayerScoreSummary]:
    """
    Sort players and assign competition ranks.

    Order: total points desc, correct picks desc, name asc (case-insensitive).

    Ranks compare total points only: a player level on points with the one
    above shares their rank even if separated by correct picks or name; the
    next lower total takes its 1-based position (1, 1, 3 rather than 1, 1, 2).

    Returns:
        New summaries with rank set, in leaderboard order
    """
    ordered = sorted(summaries, key=_sort_key)

    ranked = []
    current_rank = 1
    for i, summary in enumerate(ordered):
        if i > 0 and summary.total_points < ordered[i - 1].total_points:
            current_rank = i + 1
        ranked.append(replace(summary, rank=current_rank))
    return ranked


def build_leaderboard(
    players: Iterable[Player | dict],
    games: Iterable[Game] | Mapping[str, Game],
    config: Optional[ScoringConfig | dict] = None,
    include_live: bool = False,
) -> list[PlayerScoreSummary]:
    """
    Score every player and return the ranked leaderboard.

    Args:
        players: Player objects (or raw player dicts with a 'picks' list)
        games: Games as a list or an id -> Game mapping
        config: Scoring configuration (defaults if None)
        include_live: Count provisional points from in-progress games

    Returns:
        Ranked list of PlayerScoreSummary
    """
    config = coerce_config(config)
    game_map = index_games(games)

    summaries = []
    for player in players:
        if isinstance(player, Mapping):
            player = Player.from_dict(player)
        elif not isinstance(player, Player):
            logger.warning(f'Skipping malformed player record: {player!r}')
            continue
        summaries.append(
            aggregate_player(
                player.picks,
                game_map,
                config,
                player_id=player.id,
                player_name=player.name,
                display_order=player.display_order,
                include_live=include_live,
            )
        )

    logger.debug(f'Scored {len(summaries)} players against {len(game_map)} games')
    return rank_players(summaries)

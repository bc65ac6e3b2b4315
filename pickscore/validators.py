"""Validation functions for pick submissions and computed summaries."""

from typing import Iterable, Optional

from .models import Game, Pick, PlayerScoreSummary


def validate_picks(
    picks: Iterable[Pick],
    games: Iterable[Game],
    team_names: Optional[Iterable[str]] = None,
) -> tuple[list[Pick], list[str], list[str]]:
    """
    Validate a player's picks against the schedule.

    Checks:
    - Every pick references a game on the schedule (error)
    - Submitted team names match known teams, if team_names is given (warning)
    - At most one pick per game; the later pick replaces the earlier (warning)
    - Every game has a pick (warning)

    Args:
        picks: Parsed picks
        games: Game schedule
        team_names: Optional known team names/abbreviations (case-insensitive)

    Returns:
        Tuple of (valid_picks, warnings, errors)
    """
    games = list(games)
    game_ids = {game.id for game in games}
    known_teams = {name.lower() for name in team_names} if team_names is not None else None

    valid: dict[str, Pick] = {}
    warnings: list[str] = []
    errors: list[str] = []

    for pick in picks:
        if pick.game_id not in game_ids:
            errors.append(f'Game ID {pick.game_id} not found in schedule')
            continue

        if known_teams is not None:
            for team in (pick.team_a, pick.team_b):
                if team and team.lower() not in known_teams:
                    warnings.append(f'Game {pick.game_id}: team "{team}" may not match schedule data')

        if pick.game_id in valid:
            warnings.append(f'Duplicate pick for game {pick.game_id}, using latest')
        valid[pick.game_id] = pick

    for game in games:
        if game.id not in valid:
            warnings.append(f'No pick submitted for {game.name or game.id}')

    return list(valid.values()), warnings, errors


def validate_summary(summary: PlayerScoreSummary) -> list[str]:
    """
    Check that a player's summary is internally consistent.

    Sanity checks:
    - Round breakdown points add up to the total (within rounding)
    - Round breakdown counts add up to scored games
    - Correct picks never exceed scored games
    - Accuracy is a formatted string, never NaN

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    name = summary.player_name or summary.player_id

    breakdown_points = sum(stats.points for stats in summary.round_breakdown.values())
    diff = abs(breakdown_points - summary.total_points)
    if diff > 0.01:
        warnings.append(
            f'{name} breakdown sum ({breakdown_points:.2f}) != total ({summary.total_points:.2f})'
        )

    breakdown_total = sum(stats.total for stats in summary.round_breakdown.values())
    if breakdown_total != summary.scored_games:
        warnings.append(
            f'{name} breakdown counts {breakdown_total} games but scored {summary.scored_games}'
        )

    if summary.correct_picks > summary.scored_games:
        warnings.append(
            f'{name} has {summary.correct_picks} correct picks from {summary.scored_games} scored games'
        )

    if not isinstance(summary.accuracy, str) or summary.accuracy.lower() == 'nan':
        warnings.append(f'{name} has invalid accuracy: {summary.accuracy!r}')

    return warnings


def validate_leaderboard(leaderboard: list[PlayerScoreSummary]) -> list[str]:
    """
    Validate a ranked leaderboard.

    Returns:
        Warning messages for every summary plus any ordering/rank problems
    """
    warnings = []
    for i, summary in enumerate(leaderboard):
        warnings.extend(validate_summary(summary))
        if summary.rank is None:
            warnings.append(f'{summary.player_name} has no rank')
            continue
        if i == 0:
            continue
        previous = leaderboard[i - 1]
        if summary.total_points > previous.total_points:
            warnings.append(f'{summary.player_name} is ranked below a lower total')
        if previous.rank is not None and summary.rank < previous.rank:
            warnings.append(f'{summary.player_name} has rank {summary.rank} after rank {previous.rank}')

    return warnings

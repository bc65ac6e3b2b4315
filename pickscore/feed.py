"""Game feed parsing and manual overrides.

Turns an ESPN-style scoreboard payload into Game objects. Fetching the
payload (and caching it) is up to the caller.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Optional

from .models import Game, parse_datetime, parse_int
from .schemas import GameOverridesFile
from .status import GameStatus, normalize_status
from .utils import load_json, load_json_safe

logger = logging.getLogger('pickscore.feed')


def _competitor_score(competitor: Optional[dict]) -> Optional[int]:
    if not competitor:
        return None
    score = competitor.get('score')
    if isinstance(score, dict):
        score = score.get('value', score.get('displayValue'))
    if score is None or score == '':
        return None
    return parse_int(score)


def _competitor_name(competitor: Optional[dict]) -> Optional[str]:
    if not competitor:
        return None
    team = competitor.get('team') or {}
    return team.get('displayName') or team.get('name') or team.get('abbreviation')


def parse_event(event: dict) -> Optional[Game]:
    """
    Parse one scoreboard event.

    Team A is the away side, team B the home side.

    Returns:
        Game, or None if the event has no competition
    """
    competitions = event.get('competitions') or []
    if not competitions:
        return None
    competition = competitions[0]

    competitors = competition.get('competitors') or []
    home = next((c for c in competitors if c.get('homeAway') == 'home'), None)
    away = next((c for c in competitors if c.get('homeAway') == 'away'), None)

    season_type = (event.get('season') or {}).get('type')
    round_name = season_type.get('name') if isinstance(season_type, dict) else None

    return Game(
        id=str(event.get('id', '')),
        status=normalize_status(competition.get('status') or event.get('status')),
        scheduled_at=parse_datetime(event.get('date') or competition.get('date')),
        score_a=_competitor_score(away),
        score_b=_competitor_score(home),
        round_name=round_name,
        name=event.get('name'),
        short_name=event.get('shortName'),
        team_a=_competitor_name(away),
        team_b=_competitor_name(home),
    )


def parse_scoreboard(data: dict) -> list[Game]:
    """Parse every event in a scoreboard payload, skipping events without a competition."""
    games = []
    for event in data.get('events') or []:
        game = parse_event(event)
        if game is None:
            logger.debug(f'Skipping event {event.get("id")} with no competition')
            continue
        games.append(game)
    return games


def parse_games(data: Any) -> list[Game]:
    """
    Parse games from any supported JSON document.

    Accepts a scoreboard payload ({'events': [...]}), a {'games': [...]}
    wrapper, or a bare list of game records.
    """
    if isinstance(data, dict) and 'events' in data:
        return parse_scoreboard(data)
    if isinstance(data, dict):
        data = data.get('games') or []
    return [Game.from_dict(record) for record in data]


def load_games(path: Path | str) -> list[Game]:
    """Load games from a JSON file (see parse_games for accepted shapes)."""
    games = parse_games(load_json(path))
    logger.info(f'Loaded {len(games)} games from {path}')
    return games


def apply_game_overrides(
    games: Iterable[Game], overrides: GameOverridesFile | dict | None
) -> list[Game]:
    """
    Replace scores and status for overridden games.

    Overrides only apply when the override file is enabled. Games are
    replaced, never modified.
    """
    games = list(games)
    if overrides is None:
        return games
    if not isinstance(overrides, GameOverridesFile):
        overrides = GameOverridesFile.model_validate(overrides)
    if not overrides.enabled or not overrides.overrides:
        return games

    result = []
    for game in games:
        override = overrides.overrides.get(game.id)
        if override is None:
            result.append(game)
            continue
        logger.info(
            f'Override applied to game {game.id}: '
            f'{override.score_a}-{override.score_b} ({override.status})'
        )
        result.append(
            replace(
                game,
                score_a=override.score_a,
                score_b=override.score_b,
                status=GameStatus(state=override.status, detail=override.status_detail),
            )
        )
    return result


def load_game_overrides(path: Path | str) -> GameOverridesFile:
    """Load game_overrides.json; a missing or invalid file disables overrides."""
    return load_json_safe(path, default=GameOverridesFile(), schema=GameOverridesFile)

"""Pick file parsing: CSV uploads, per-player pick files and templates."""

import io
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

import polars as pl

from .constants import DEFAULT_CONFIDENCE
from .models import Game, Pick, Player, parse_int
from .schemas import PlayerEntry, PlayersFile
from .scoring import clamp_confidence
from .utils import load_json

logger = logging.getLogger('pickscore.picks_loader')

# Accepted header spellings after normalization
GAME_ID_COLUMNS = ('game_id', 'gameid', 'event_id', 'eventid')
TEAM_A_COLUMNS = ('team_a', 'teama', 'away_team', 'awayteam')
TEAM_A_SCORE_COLUMNS = ('team_a_score', 'teama_score', 'away_score', 'awayscore')
TEAM_B_COLUMNS = ('team_b', 'teamb', 'home_team', 'hometeam')
TEAM_B_SCORE_COLUMNS = ('team_b_score', 'teamb_score', 'home_score', 'homescore')

TEMPLATE_COLUMNS = ['game_id', 'team_a', 'team_a_score', 'team_b', 'team_b_score', 'confidence']

# Confidence above this is read as a percentage (e.g. 80 -> 0.8)
PERCENT_THRESHOLD = 1.5


def normalize_header(header: str) -> str:
    """'Team A Score ' -> 'team_a_score'."""
    return re.sub(r'\s+', '_', header.strip().lower())


def parse_confidence(value: Any) -> float:
    """
    Parse a confidence cell.

    Accepts fractions (0.75) or percentages (75). Blank or unparseable
    values are a toss-up (0.5). The result is clamped to [0.5, 1.0].
    """
    if value is None:
        return DEFAULT_CONFIDENCE
    text = str(value).strip().rstrip('%')
    if not text:
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(text)
    except ValueError:
        return DEFAULT_CONFIDENCE
    if confidence > PERCENT_THRESHOLD:
        confidence /= 100
    return clamp_confidence(confidence)


def _cell(row: dict[str, Optional[str]], columns: Iterable[str]) -> str:
    """First non-blank value among alias columns, trimmed."""
    for column in columns:
        value = row.get(column)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ''


def _read_csv(text: str) -> pl.DataFrame:
    """Read CSV text with every column as a string and normalized headers."""
    df = pl.read_csv(
        io.BytesIO(text.encode('utf-8')),
        infer_schema_length=0,
        truncate_ragged_lines=True,
    )
    names = [normalize_header(column) for column in df.columns]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f'duplicate columns after normalizing headers: {", ".join(duplicates)}')
    return df.rename(dict(zip(df.columns, names)))


def parse_pick_row(row: dict[str, Optional[str]], row_num: int, player_id: str = '') -> Pick | str:
    """
    Parse one CSV row.

    Returns:
        Pick, or an error message string for an invalid row
    """
    game_id = _cell(row, GAME_ID_COLUMNS)
    team_a = _cell(row, TEAM_A_COLUMNS)
    team_b = _cell(row, TEAM_B_COLUMNS)

    if not game_id:
        return f'Row {row_num}: Missing game_id'
    if not team_a or not team_b:
        return f'Row {row_num}: Missing team name(s)'

    score_a = parse_int(_cell(row, TEAM_A_SCORE_COLUMNS))
    score_b = parse_int(_cell(row, TEAM_B_SCORE_COLUMNS))
    if score_a is None or score_b is None:
        return f'Row {row_num}: Invalid score value(s)'
    if score_a < 0 or score_b < 0:
        return f'Row {row_num}: Scores cannot be negative'

    return Pick(
        player_id=player_id,
        game_id=game_id,
        predicted_score_a=score_a,
        predicted_score_b=score_b,
        confidence=parse_confidence(row.get('confidence')),
        team_a=team_a,
        team_b=team_b,
    )


def parse_picks_csv(text: str, player_id: str = '') -> tuple[list[Pick], list[str]]:
    """
    Parse a CSV of picks.

    Expected columns (case and spacing in headers don't matter):
        game_id, team_a, team_a_score, team_b, team_b_score[, confidence]

    Args:
        text: Raw CSV content
        player_id: Player the picks belong to

    Returns:
        Tuple of (picks, errors); row numbers in errors count the header as row 1
    """
    if not text or not text.strip():
        return [], []

    try:
        df = _read_csv(text)
    except (
        pl.exceptions.NoDataError,
        pl.exceptions.ComputeError,
        pl.exceptions.DuplicateError,
        ValueError,
    ) as e:
        logger.error(f'Could not parse picks CSV: {e}')
        return [], [f'CSV parse error: {e}']

    picks: list[Pick] = []
    errors: list[str] = []

    for i, row in enumerate(df.iter_rows(named=True)):
        if not any(value is not None and str(value).strip() for value in row.values()):
            continue
        parsed = parse_pick_row(row, i + 2, player_id)
        if isinstance(parsed, str):
            errors.append(parsed)
        else:
            picks.append(parsed)

    return picks, errors


def load_players(manifest_path: Path | str) -> list[PlayerEntry]:
    """Load the players manifest (players.json)."""
    return load_json(manifest_path, schema=PlayersFile).players


def pick_file_name(player_id: str) -> str:
    """'Player-One' -> 'playerone.csv'."""
    return re.sub(r'[^a-z0-9]', '', player_id.lower()) + '.csv'


def load_player_picks(picks_dir: Path | str, player: PlayerEntry) -> list[Pick]:
    """
    Load one player's picks from <picks_dir>/<id>.csv.

    A missing file means no picks. Invalid rows are logged and skipped.
    """
    path = Path(picks_dir) / pick_file_name(player.id)
    if not path.exists():
        logger.warning(f'No picks file found for player {player.name} ({path})')
        return []

    picks, errors = parse_picks_csv(path.read_text(encoding='utf-8'), player.id)
    for error in errors:
        logger.warning(f'{path.name}: {error}')
    logger.debug(f'Loaded {len(picks)} picks for {player.name}')
    return picks


def load_all_player_picks(picks_dir: Path | str, manifest: str = 'players.json') -> list[Player]:
    """
    Load all players and their picks.

    Args:
        picks_dir: Directory holding players.json and one CSV per player
        manifest: Manifest file name inside picks_dir

    Returns:
        List of Player objects with picks attached, in manifest order
    """
    picks_dir = Path(picks_dir)
    players = []
    for index, entry in enumerate(load_players(picks_dir / manifest)):
        players.append(
            Player(
                id=entry.id,
                name=entry.name,
                display_order=entry.display_order if entry.display_order is not None else index + 1,
                picks=tuple(load_player_picks(picks_dir, entry)),
            )
        )
    logger.info(f'Loaded picks for {len(players)} players from {picks_dir}')
    return players


def generate_picks_template(games: Iterable[Game]) -> str:
    """
    Generate a blank picks CSV for a schedule.

    Scores and confidence are left empty for the player to fill in.
    """
    rows: dict[str, list[Optional[str]]] = {column: [] for column in TEMPLATE_COLUMNS}
    for game in games:
        rows['game_id'].append(game.id)
        rows['team_a'].append(game.team_a or 'Team A')
        rows['team_a_score'].append(None)
        rows['team_b'].append(game.team_b or 'Team B')
        rows['team_b_score'].append(None)
        rows['confidence'].append(None)

    df = pl.DataFrame(rows, schema={column: pl.String for column in TEMPLATE_COLUMNS})
    return df.write_csv()

#!/usr/bin/env python3
"""
pickscore CLI

Scores every player's picks against a games file and prints the leaderboard.
Players come from <picks-dir>/players.json, picks from <picks-dir>/<id>.csv.

Usage:
    pickscore --games data/games.json --picks-dir data/picks
    pickscore --games data/games.json --picks-dir data/picks --output web/data/tournament.json
    pickscore --games data/games.json --template picks_template.csv
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import load_scoring_config
from .feed import apply_game_overrides, load_game_overrides, load_games
from .leaderboard import build_leaderboard
from .logging_config import setup_logging
from .models import Player
from .picks_loader import generate_picks_template, load_all_player_picks
from .tournament import build_tournament_data
from .utils import save_json
from .validators import validate_leaderboard, validate_picks

logger = logging.getLogger('pickscore.cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pickscore',
        description='Score prediction picks and rank players',
    )
    parser.add_argument(
        '--games', '-g',
        required=True,
        help='Games JSON (scoreboard payload, {"games": [...]}, or a list of games)',
    )
    parser.add_argument(
        '--picks-dir', '-p',
        default='data/picks',
        help='Directory with players.json and one picks CSV per player',
    )
    parser.add_argument(
        '--config', '-c',
        default=None,
        help='Scoring config JSON (defaults to config/scoring.json if present)',
    )
    parser.add_argument(
        '--overrides',
        default=None,
        help='Game overrides JSON (applied only when enabled)',
    )
    parser.add_argument(
        '--include-live',
        action='store_true',
        help='Count provisional points from in-progress games',
    )
    parser.add_argument(
        '--output', '-o',
        default=None,
        help='Write the tournament document (games, leaderboard, progress) to this path',
    )
    parser.add_argument(
        '--template',
        default=None,
        help='Write a blank picks CSV for the games to this path and exit',
    )
    parser.add_argument(
        '--log-dir',
        default=None,
        help='Write a log file to this directory',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Debug logging',
    )
    return parser


def print_leaderboard(leaderboard) -> None:
    print('\n' + '=' * 60)
    print('LEADERBOARD')
    print('=' * 60)
    for summary in leaderboard:
        print(
            f'  {summary.rank:>3}. {summary.player_name:<24} {summary.total_points:>8.2f} pts  '
            f'{summary.correct_picks}/{summary.scored_games} ({summary.accuracy}%)'
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        log_dir=Path(args.log_dir) if args.log_dir else None,
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=args.log_dir is not None,
    )

    try:
        games = load_games(args.games)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error(f'Could not load games: {e}')
        return 1

    if args.template:
        template_path = Path(args.template)
        template_path.parent.mkdir(parents=True, exist_ok=True)
        template_path.write_text(generate_picks_template(games), encoding='utf-8')
        logger.info(f'Wrote picks template for {len(games)} games to {template_path}')
        return 0

    try:
        config = load_scoring_config(args.config)
        players = load_all_player_picks(args.picks_dir)
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        logger.error(f'Could not load inputs: {e}')
        return 1

    if args.overrides:
        games = apply_game_overrides(games, load_game_overrides(args.overrides))

    checked = []
    for player in players:
        picks, warnings, errors = validate_picks(player.picks, games)
        for message in errors:
            logger.warning(f'{player.name}: {message}')
        for message in warnings:
            logger.debug(f'{player.name}: {message}')
        checked.append(
            Player(id=player.id, name=player.name, display_order=player.display_order, picks=tuple(picks))
        )

    leaderboard = build_leaderboard(checked, games, config, include_live=args.include_live)
    for message in validate_leaderboard(leaderboard):
        logger.warning(message)

    print(f'Scoring mode: {config.mode}')
    print_leaderboard(leaderboard)

    if args.output:
        data = build_tournament_data(games, checked, config, include_live=args.include_live)
        save_json(args.output, data)
        logger.info(f'Tournament data written to {args.output}')

    return 0


if __name__ == '__main__':
    sys.exit(main())

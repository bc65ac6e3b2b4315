from .models import Game, Pick, Player, PickScoreResult, PlayerScoreSummary, RoundStats, TournamentProgress
from .status import GameStatus, normalize_status
from .results import resolve_result
from .rounds import classify_round, detect_overtime, resolve_multiplier
from .scoring import brier_points, clamp_confidence, score_pick
from .leaderboard import aggregate_player, build_leaderboard, rank_players
from .schemas import ScoringConfig
from .config import load_scoring_config, get_config, clear_config_cache
from .picks_loader import (
    parse_picks_csv,
    load_all_player_picks,
    generate_picks_template,
)
from .feed import (
    parse_scoreboard,
    load_games,
    apply_game_overrides,
    load_game_overrides,
)
from .tournament import build_tournament_data, tournament_progress
from .validators import validate_picks, validate_summary

__all__ = [
    # Models
    'Game',
    'Pick',
    'Player',
    'PickScoreResult',
    'PlayerScoreSummary',
    'RoundStats',
    'TournamentProgress',
    'GameStatus',
    # Scoring engine
    'normalize_status',
    'resolve_result',
    'classify_round',
    'detect_overtime',
    'resolve_multiplier',
    'brier_points',
    'clamp_confidence',
    'score_pick',
    'aggregate_player',
    'rank_players',
    'build_leaderboard',
    # Configuration
    'ScoringConfig',
    'load_scoring_config',
    'get_config',
    'clear_config_cache',
    # Picks
    'parse_picks_csv',
    'load_all_player_picks',
    'generate_picks_template',
    # Games feed
    'parse_scoreboard',
    'load_games',
    'apply_game_overrides',
    'load_game_overrides',
    # Tournament payload
    'build_tournament_data',
    'tournament_progress',
    # Validation
    'validate_picks',
    'validate_summary',
]

"""Unit tests for status, result, round and pick scoring functions."""

from datetime import datetime, timezone

import pytest

from pickscore.models import Game, Pick
from pickscore.results import resolve_result
from pickscore.rounds import classify_round, detect_overtime, resolve_multiplier
from pickscore.schemas import ScoringConfig
from pickscore.scoring import brier_points, clamp_confidence, score_pick
from pickscore.status import GameStatus, normalize_status

BRIER = ScoringConfig(mode='brier')


def final_game(score_a, score_b, game_id='g1', detail=None, round_hint='groupStage'):
    return Game(
        id=game_id,
        status=GameStatus('final', detail=detail),
        score_a=score_a,
        score_b=score_b,
        round_hint=round_hint,
    )


class TestStatusNormalization:
    """Tests for mapping upstream status values to game states."""

    @pytest.mark.parametrize('raw, expected', [
        ('final', 'final'),
        ('post', 'final'),
        ('STATUS_FINAL', 'final'),
        ('pre', 'scheduled'),
        ('STATUS_SCHEDULED', 'scheduled'),
        ('in', 'in_progress'),
        ('live', 'in_progress'),
        ('STATUS_IN_PROGRESS', 'in_progress'),
        ('In Progress', 'in_progress'),
        ('garbage', 'unknown'),
    ])
    def test_string_statuses(self, raw, expected):
        """Test exact tokens first, then substring containment."""
        assert normalize_status(raw).state == expected

    def test_numeric_type_code_wins(self):
        """Test status.type.id takes priority over the state text."""
        status = normalize_status({'type': {'id': '3', 'state': 'in', 'shortDetail': 'Final/OT'}})
        assert status.state == 'final'
        assert status.detail == 'Final/OT'

    def test_live_clock_and_period(self):
        """Test period and clock are carried through for live games."""
        status = normalize_status({'type': {'id': '2'}, 'period': 2, 'displayClock': '12:34'})
        assert status.state == 'in_progress'
        assert status.period == 2
        assert status.clock == '12:34'

    def test_already_normalized_dict(self):
        """Test {'state', 'detail'} dicts from stored rows."""
        status = normalize_status({'state': 'final', 'detail': 'Final/SO'})
        assert status.state == 'final'
        assert status.detail == 'Final/SO'

    def test_separate_detail_argument(self):
        """Test flat records that keep the detail in another column."""
        status = normalize_status('final', 'Final/OT')
        assert status == GameStatus('final', detail='Final/OT')

    @pytest.mark.parametrize('raw', [None, 42, [], {}])
    def test_unrecognized_inputs_are_unknown(self, raw):
        """Test anything unparseable is 'unknown', never an error."""
        assert normalize_status(raw).state == 'unknown'


class TestResultResolution:
    """Tests for win/tie resolution."""

    def test_win_a(self):
        assert resolve_result(5, 1) == 'win_a'

    def test_win_b(self):
        assert resolve_result(2, 3) == 'win_b'

    def test_tie(self):
        assert resolve_result(4, 4) == 'tie'
        assert resolve_result(0, 0) == 'tie'

    def test_missing_score(self):
        """Test a missing score gives no result."""
        assert resolve_result(None, 2) is None
        assert resolve_result(1, None) is None


class TestRoundClassification:
    """Tests for the round classifier."""

    def test_hint_wins(self):
        """Test a valid round hint is used as-is."""
        game = Game(id='1', round_hint='medalRound', round_name='Group A')
        assert classify_round(game) == 'medalRound'

    def test_invalid_hint_ignored(self):
        """Test an invalid hint falls through to keywords."""
        game = Game(id='1', round_hint='final', round_name='Quarterfinal')
        assert classify_round(game) == 'knockoutRound'

    @pytest.mark.parametrize('name, expected', [
        ('Gold Medal Game', 'medalRound'),
        ('Bronze Medal Game', 'medalRound'),
        ("Men's Semifinal", 'knockoutRound'),
        ('Quarterfinal 2', 'knockoutRound'),
        ('Knockout Stage', 'knockoutRound'),
        ('Group B', 'groupStage'),
        ('Preliminary Round', 'groupStage'),
    ])
    def test_keywords(self, name, expected):
        """Test built-in keyword matching on the round name."""
        assert classify_round(Game(id='1', round_name=name)) == expected

    def test_event_name_used_without_round_name(self):
        """Test the event name is searched when there's no round name."""
        assert classify_round(Game(id='1', name='Canada vs USA - Gold Medal')) == 'medalRound'

    def test_configured_keywords_checked_first(self):
        """Test configured roundTypes mappings beat built-in keywords."""
        config = ScoringConfig.model_validate({'roundTypes': {'playoff': 'knockoutRound'}})
        game = Game(id='1', round_name='Playoff Group')
        assert classify_round(game, config) == 'knockoutRound'

    def test_knockout_cutoff(self):
        """Test the date fallback only applies when keywords are inconclusive."""
        config = ScoringConfig.model_validate({'knockoutCutoff': '2026-02-16T00:00:00Z'})
        late = datetime(2026, 2, 17, 12, tzinfo=timezone.utc)
        early = datetime(2026, 2, 10, 12, tzinfo=timezone.utc)

        assert classify_round(Game(id='1', scheduled_at=late), config) == 'knockoutRound'
        assert classify_round(Game(id='2', scheduled_at=early), config) == 'groupStage'
        assert classify_round(Game(id='3', scheduled_at=late, round_name='Group A'), config) == 'groupStage'

    def test_default_group_stage(self):
        """Test a game with nothing to go on is group stage."""
        assert classify_round(Game(id='1')) == 'groupStage'


class TestOvertimeDetection:
    """Tests for OT/shootout detection in status detail."""

    @pytest.mark.parametrize('detail, expected', [
        ('Final/OT', 'overtime'),
        ('Final/2OT', 'overtime'),
        ('Overtime', 'overtime'),
        ('Final/SO', 'shootout'),
        ('Final - Shootout', 'shootout'),
        ('Final', None),
        ('Final (Scotland)', None),
        ('', None),
        (None, None),
    ])
    def test_detect(self, detail, expected):
        assert detect_overtime(detail) == expected


class TestMultiplierResolution:
    """Tests for classic and Brier multipliers."""

    def test_classic_ignores_overtime(self):
        """Test classic mode uses flat round points even after OT."""
        assert resolve_multiplier('knockoutRound', 'Final/OT', ScoringConfig()) == (2, 'overtime', False)

    def test_brier_without_base_multipliers_uses_round_points(self):
        """Test Brier regulation falls back to the classic round points."""
        assert resolve_multiplier('medalRound', 'Final', BRIER) == (3, None, False)
        assert resolve_multiplier('groupStage', None, BRIER) == (1, None, False)

    def test_brier_base_multipliers(self):
        """Test explicit Brier multipliers collapse rounds into groupStage/playoff."""
        config = ScoringConfig.model_validate(
            {'mode': 'brier', 'brier': {'baseMultipliers': {'groupStage': 1, 'playoff': 2}}}
        )
        assert resolve_multiplier('groupStage', None, config)[0] == 1
        assert resolve_multiplier('knockoutRound', None, config)[0] == 2
        assert resolve_multiplier('medalRound', None, config)[0] == 2

    def test_brier_overtime_replaces_base(self):
        """Test OT/SO multipliers replace the regulation multiplier."""
        assert resolve_multiplier('knockoutRound', 'Final/OT', BRIER) == (1.5, 'overtime', True)
        assert resolve_multiplier('groupStage', 'Final/SO', BRIER) == (0.75, 'shootout', True)


class TestBrierPoints:
    """Tests for the Brier formula."""

    def test_confident_correct(self):
        assert brier_points(True, 1.0, 1) == 25.0

    def test_confident_wrong(self):
        assert brier_points(False, 1.0, 1) == -75.0

    def test_toss_up_always_zero(self):
        """Test confidence 0.5 scores zero whether right or wrong."""
        assert brier_points(True, 0.5, 1) == 0.0
        assert brier_points(False, 0.5, 3) == 0.0

    def test_partial_confidence(self):
        assert brier_points(True, 0.8, 1) == 21.0
        assert brier_points(False, 0.6, 1) == -11.0

    def test_multiplier_scales_penalty(self):
        assert brier_points(True, 0.75, 2) == 37.5
        assert brier_points(False, 1.0, 2) == -150.0

    def test_confidence_clamped(self):
        """Test out-of-range confidence is clamped to [0.5, 1.0]."""
        assert brier_points(True, 1.4, 1) == 25.0
        assert brier_points(False, 0.1, 1) == 0.0

    def test_custom_base_and_scale(self):
        config = ScoringConfig.model_validate({'brier': {'base': 10, 'multiplier': 40}})
        assert brier_points(False, 1.0, 1, config) == -30.0

    @pytest.mark.parametrize('raw, expected', [
        (None, 0.5),
        ('abc', 0.5),
        (float('nan'), 0.5),
        (0.2, 0.5),
        (0.7, 0.7),
        (3, 1.0),
    ])
    def test_clamp_confidence(self, raw, expected):
        assert clamp_confidence(raw) == expected


class TestScorePick:
    """Tests for scoring a single pick."""

    def test_game_not_started(self):
        """Test scheduled games give a neutral result with a reason."""
        game = Game(id='g1', status=GameStatus('scheduled'), score_a=0, score_b=0)
        result = score_pick(Pick('p1', 'g1', 2, 1), game)
        assert result.total_points == 0
        assert not result.is_correct
        assert result.details['reason'] == 'Game not started'

    def test_unknown_status_not_started(self):
        game = Game(id='g1', score_a=1, score_b=0)
        assert score_pick(Pick('p1', 'g1', 1, 0), game).details['reason'] == 'Game not started'

    def test_missing_scores(self):
        """Test a final game without scores is neutral."""
        game = final_game(None, None)
        result = score_pick(Pick('p1', 'g1', 2, 1), game)
        assert result.details['reason'] == 'Missing actual scores'
        assert result.total_points == 0

    def test_classic_correct_winner(self):
        result = score_pick(Pick('p1', 'g1', 3, 1), final_game(2, 0))
        assert result.is_correct
        assert result.total_points == 1
        assert result.details['predicted_result'] == 'win_a'
        assert result.details['actual_result'] == 'win_a'

    def test_classic_round_points(self):
        """Test knockout and medal picks are worth 2 and 3."""
        assert score_pick(Pick('p1', 'g1', 1, 2), final_game(0, 4, round_hint='knockoutRound')).total_points == 2
        assert score_pick(Pick('p1', 'g1', 1, 2), final_game(0, 4, round_hint='medalRound')).total_points == 3

    def test_classic_wrong(self):
        result = score_pick(Pick('p1', 'g1', 3, 1), final_game(1, 3))
        assert not result.is_correct
        assert result.total_points == 0

    def test_classic_tie(self):
        """Test a predicted tie matches any tie."""
        result = score_pick(Pick('p1', 'g1', 1, 1), final_game(4, 4))
        assert result.is_correct

    def test_exact_score_bonus(self):
        """Test the exact score bonus adds to the round points."""
        config = ScoringConfig.model_validate({'exactScoreBonus': {'enabled': True, 'points': 1}})
        exact = score_pick(Pick('p1', 'g1', 2, 0), final_game(2, 0), config)
        assert exact.base_points == 1
        assert exact.bonus_points == 1
        assert exact.total_points == 2
        assert exact.details['exact_score'] is True

        close = score_pick(Pick('p1', 'g1', 3, 0), final_game(2, 0), config)
        assert close.total_points == 1
        assert close.details['exact_score'] is False

    def test_exact_score_bonus_disabled_by_default(self):
        result = score_pick(Pick('p1', 'g1', 2, 0), final_game(2, 0))
        assert result.bonus_points == 0
        assert result.total_points == 1

    def test_exact_score_bonus_ignored_in_brier_mode(self):
        """Test the exact score bonus never applies in Brier mode."""
        config = {'mode': 'brier', 'exactScoreBonus': {'enabled': True, 'points': 5}}
        result = score_pick(Pick('p1', 'g1', 2, 0, confidence=1.0), final_game(2, 0), config)
        assert result.bonus_points == 0
        assert result.total_points == 25.0
        assert result.details['exact_score'] is False

    @pytest.mark.parametrize('config', [
        {'mode': 'brier', 'brier': None},
        {'mode': 'brier', 'points': None},
        {'mode': 'brier', 'exactScoreBonus': None},
        {'mode': 'brier', 'brier': {'overtimeMultipliers': None}},
        {'mode': 'brier', 'roundTypes': None},
    ])
    def test_null_config_sections_use_defaults(self, config):
        """Test explicitly null config sections score like missing ones."""
        game = final_game(3, 2, detail='Final/OT', round_hint='knockoutRound')
        result = score_pick(Pick('p1', 'g1', 2, 1, confidence=1.0), game, config)
        assert result.total_points == 37.5

    def test_explicit_result_overrides_scores(self):
        """Test an explicit predicted result is used instead of the scores."""
        pick = Pick('p1', 'g1', 0, 0, explicit_result='win_b')
        assert score_pick(pick, final_game(1, 2)).is_correct

    def test_brier_mode(self):
        result = score_pick(Pick('p1', 'g1', 3, 1, confidence=0.8), final_game(2, 0), BRIER)
        assert result.is_correct
        assert result.total_points == 21.0
        assert result.base_points == 21.0
        assert result.details['confidence'] == 0.8
        assert result.details['mode'] == 'brier'

    def test_brier_wrong_pick_negative(self):
        result = score_pick(Pick('p1', 'g1', 0, 3, confidence=1.0), final_game(3, 1), BRIER)
        assert not result.is_correct
        assert result.total_points == -75.0

    def test_brier_missing_confidence_is_toss_up(self):
        result = score_pick(Pick('p1', 'g1', 3, 1), final_game(2, 0), BRIER)
        assert result.total_points == 0.0
        assert result.details['confidence'] == 0.5

    def test_brier_knockout_overtime(self):
        """Test a knockout game decided in OT uses the 1.5 multiplier."""
        game = final_game(3, 2, detail='Final/OT', round_hint='knockoutRound')
        result = score_pick(Pick('p1', 'g1', 2, 1, confidence=1.0), game, BRIER)
        assert result.total_points == 37.5
        assert result.details['overtime'] == 'overtime'
        assert result.details['overtime_applied'] is True
        assert result.details['multiplier'] == 1.5

    def test_brier_group_shootout(self):
        game = final_game(2, 3, detail='Final/SO')
        result = score_pick(Pick('p1', 'g1', 1, 2, confidence=1.0), game, BRIER)
        assert result.total_points == 18.75

    def test_brier_knockout_regulation(self):
        """Test a knockout pick at full confidence is worth 50 without OT."""
        game = final_game(3, 2, round_hint='knockoutRound')
        result = score_pick(Pick('p1', 'g1', 2, 1, confidence=1.0), game, BRIER)
        assert result.total_points == 50.0

    def test_in_progress_is_provisional(self):
        """Test live games are scored against the current score and flagged."""
        game = Game(id='g1', status=GameStatus('in_progress'), score_a=1, score_b=0, round_hint='groupStage')
        result = score_pick(Pick('p1', 'g1', 2, 0), game)
        assert result.is_correct
        assert result.details['provisional'] is True

    def test_dict_config_accepted(self):
        result = score_pick(Pick('p1', 'g1', 3, 1, confidence=1.0), final_game(2, 0), {'mode': 'brier'})
        assert result.total_points == 25.0

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValueError):
            ScoringConfig.model_validate({'mode': 'points'})

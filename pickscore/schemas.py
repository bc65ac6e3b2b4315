"""Pydantic schemas for scoring configuration and JSON data files."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .constants import GROUP_STAGE, KNOCKOUT_ROUND, MEDAL_ROUND, ROUND_TYPES


class RoundPoints(BaseModel):
    """Flat points per round bucket (classic mode)."""

    group_stage: float = Field(1, alias='groupStage')
    knockout_round: float = Field(2, alias='knockoutRound')
    medal_round: float = Field(3, alias='medalRound')

    def for_round(self, round_type: str) -> float:
        """Points for a round bucket; unknown buckets score as group stage."""
        return {
            GROUP_STAGE: self.group_stage,
            KNOCKOUT_ROUND: self.knockout_round,
            MEDAL_ROUND: self.medal_round,
        }.get(round_type, self.group_stage)

    class Config:
        extra = 'ignore'
        frozen = True
        populate_by_name = True


class ExactScoreBonus(BaseModel):
    """Additive bonus for predicting the exact final score (classic mode only)."""

    enabled: bool = False
    points: float = 1

    class Config:
        extra = 'ignore'
        frozen = True


class BaseMultipliers(BaseModel):
    """Regulation multipliers per Brier bucket."""

    group_stage: float = Field(1, alias='groupStage')
    playoff: float = 2

    class Config:
        extra = 'ignore'
        frozen = True
        populate_by_name = True


class OvertimeMultipliers(BaseModel):
    """Multipliers that replace the regulation ones for OT/shootout results."""

    group_stage: float = Field(0.75, alias='groupStage')
    playoff: float = 1.5

    class Config:
        extra = 'ignore'
        frozen = True
        populate_by_name = True


class BrierSettings(BaseModel):
    """Brier formula parameters: points = m * (base - multiplier * (outcome - confidence)^2)."""

    base: float = 25
    multiplier: float = 100
    base_multipliers: BaseMultipliers | None = Field(None, alias='baseMultipliers')
    overtime_multipliers: OvertimeMultipliers = Field(
        default_factory=OvertimeMultipliers, alias='overtimeMultipliers'
    )

    @field_validator('overtime_multipliers', mode='before')
    @classmethod
    def null_section_to_default(cls, v):
        """A null section means the defaults."""
        return {} if v is None else v

    class Config:
        extra = 'ignore'
        frozen = True
        populate_by_name = True


class ScoringConfig(BaseModel):
    """Scoring configuration. Every section is optional and falls back to defaults."""

    mode: Literal['classic', 'brier'] = 'classic'
    points: RoundPoints = Field(default_factory=RoundPoints)
    exact_score_bonus: ExactScoreBonus = Field(
        default_factory=ExactScoreBonus, alias='exactScoreBonus'
    )
    brier: BrierSettings = Field(default_factory=BrierSettings)
    round_keywords: dict[str, str] = Field(default_factory=dict, alias='roundTypes')
    knockout_cutoff: datetime | None = Field(None, alias='knockoutCutoff')

    @field_validator('points', 'exact_score_bonus', 'brier', 'round_keywords', mode='before')
    @classmethod
    def null_section_to_default(cls, v):
        """Treat an explicitly null section like a missing one."""
        return {} if v is None else v

    @field_validator('round_keywords')
    @classmethod
    def validate_round_keywords(cls, v):
        """Ensure keyword mappings point at real round buckets."""
        for keyword, round_type in v.items():
            if round_type not in ROUND_TYPES:
                raise ValueError(f'Invalid round type for keyword {keyword!r}: {round_type}')
        return v

    @field_validator('knockout_cutoff')
    @classmethod
    def validate_knockout_cutoff(cls, v):
        """Treat a naive cutoff as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    class Config:
        extra = 'ignore'
        frozen = True
        populate_by_name = True


class PlayerEntry(BaseModel):
    """Player in the players manifest."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    display_order: int | None = Field(None, alias='displayOrder')

    class Config:
        extra = 'allow'
        populate_by_name = True


class PlayersFile(BaseModel):
    """Complete players.json file structure."""

    players: list[PlayerEntry] = Field(default_factory=list)

    class Config:
        extra = 'forbid'


class GameOverride(BaseModel):
    """Manual score/status override for one game."""

    score_a: int = Field(..., ge=0, alias='scoreA')
    score_b: int = Field(..., ge=0, alias='scoreB')
    status: str = Field(default='final', pattern=r'^(scheduled|in_progress|final)$')
    status_detail: str | None = Field(None, alias='statusDetail')

    class Config:
        extra = 'forbid'
        populate_by_name = True


class GameOverridesFile(BaseModel):
    """Complete game_overrides.json file structure."""

    enabled: bool = False
    overrides: dict[str, GameOverride] = Field(default_factory=dict)

    class Config:
        extra = 'forbid'

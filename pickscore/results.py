"""Game result resolution from a pair of scores."""

from typing import Optional

from .constants import TIE, WIN_A, WIN_B


def resolve_result(score_a: Optional[int], score_b: Optional[int]) -> Optional[str]:
    """
    Determine the outcome of a two-team contest.

    Args:
        score_a: Team A (away) score, or None if unknown
        score_b: Team B (home) score, or None if unknown

    Returns:
        'win_a', 'win_b' or 'tie'; None if either score is unknown
    """
    if score_a is None or score_b is None:
        return None
    if score_a > score_b:
        return WIN_A
    if score_b > score_a:
        return WIN_B
    return TIE

"""FPI spread model: home − away + HFA, home perspective.

Sign conventions:
    spread > 0 → home favored, spread < 0 → away favored.
    Pick line always shows the favorite with a negative number.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from cfbspread.models.spread import PICKEM, ConsensusComparison, ModelSpread

PICKEM_LINE = "PK"


def round1(value: float) -> float:
    """Round to one decimal, half away from zero (-3.25 → -3.3, 3.25 → 3.3)."""
    rounded = float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return rounded + 0.0  # -0.0 → 0.0


def home_field_advantage(neutral: bool, hfa: float) -> float:
    """중립 경기장이면 0, 아니면 설정값."""
    return 0.0 if neutral else hfa


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compute_model_spread(
    away: str,
    home: str,
    away_rating: Optional[float],
    home_rating: Optional[float],
    hfa: float,
) -> Optional[ModelSpread]:
    """Compute the model spread and pick line.

    Args:
        away: Away team name (as requested).
        home: Home team name (as requested).
        away_rating: Away FPI. None → no model output.
        home_rating: Home FPI. None → no model output.
        hfa: Home-field advantage already resolved for neutral sites.

    Returns:
        ModelSpread, or None if either rating is missing.
    """
    if not _is_number(away_rating) or not _is_number(home_rating):
        return None

    spread = round1(home_rating - away_rating + hfa)
    if spread > 0:
        fav = home
    elif spread < 0:
        fav = away
    else:
        fav = PICKEM

    fav_abs = f"{abs(spread):.1f}"
    pick_line = PICKEM_LINE if fav == PICKEM else f"{fav} -{fav_abs}"
    return ModelSpread(spread=spread, fav=fav, fav_abs=fav_abs, pick_line=pick_line)


def format_line(value: float) -> str:
    """+3.5 / -3.5 / 0 formatting used in the comparison text."""
    if value > 0:
        return f"+{value:g}"
    return f"{value:g}"


def compare_to_consensus(
    spread: float,
    book_line: Optional[float],
) -> ConsensusComparison:
    """Model edge vs. consensus home line (edge = spread − book_line)."""
    if not _is_number(book_line):
        return ConsensusComparison(
            book_line=None,
            edge=None,
            text="No consensus line available for this match right now.",
        )
    edge = round1(spread - book_line)
    text = (
        f"Consensus home line (DK/FD/MGM): {format_line(book_line)}. "
        f"Model edge = {edge:.1f}."
    )
    return ConsensusComparison(book_line=book_line, edge=edge, text=text)

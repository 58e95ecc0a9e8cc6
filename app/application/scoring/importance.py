import re
from datetime import date
from typing import List, Optional

# Weights of the importance score (max possible ~110, capped at 100)
RECENCY_POINTS_PER_YEAR = 15
RECENT_WINDOW_YEARS = 5
FREQUENCY_POINTS_PER_REPEAT = 10
FREQUENCY_CAP = 40
GLOBAL_WEIGHT = 30
SPREAD_POINTS_PER_YEAR = 5
SPREAD_CAP = 20
MAX_SCORE = 100

_LEADING_INT = re.compile(r"[+-]?\d+")


def parse_years(years_appeared: Optional[str]) -> List[int]:
    """
    Parse a comma separated list of years. Each token contributes its leading
    integer ("2021.5" and "2021abc" read as 2021); tokens without one are skipped.
    """
    years = []
    for token in (years_appeared or "").split(","):
        match = _LEADING_INT.match(token.strip())
        if match:
            years.append(int(match.group()))
    return years


def last_appeared_year(years_appeared: Optional[str]) -> Optional[int]:
    years = parse_years(years_appeared)
    return max(years) if years else None


def calculate_importance_score(
    repeat_count: int,
    years_appeared: Optional[str],
    global_importance: float,
    current_year: Optional[int] = None,
) -> float:
    """
    Blend frequency, recency, year spread and the manual topic weight into a
    single 0-100 score used for ranking questions.

    global_importance is expected in [0, 100]; it is validated at the API
    boundary, not here.
    """
    if current_year is None:
        current_year = date.today().year

    years = [y for y in parse_years(years_appeared) if 1900 < y <= current_year]

    recent_years = [y for y in years if y >= current_year - RECENT_WINDOW_YEARS]
    recency_score = len(recent_years) * RECENCY_POINTS_PER_YEAR

    frequency_score = min(repeat_count * FREQUENCY_POINTS_PER_REPEAT, FREQUENCY_CAP)

    global_score = (global_importance / 100) * GLOBAL_WEIGHT

    spread_score = min(len(set(years)) * SPREAD_POINTS_PER_YEAR, SPREAD_CAP)

    total = recency_score + frequency_score + global_score + spread_score
    total = max(0.0, min(float(total), float(MAX_SCORE)))
    return round(total, 2)

"""Chart data for the mood/stress trend card.

Entries come out of the store newest first; charts read left to right, so
everything here works on the reversed, chronological list.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from journal.moods import mood_score


def _average(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return round(sum(values) / len(values), 1)


def rolling_average(values: Sequence[float], window: int) -> List[float]:
    """Trailing mean over the last *window* values at each position."""
    if window < 1:
        raise ValueError("window must be at least 1")
    averages = []
    for i in range(len(values)):
        chunk = values[max(0, i - window + 1):i + 1]
        averages.append(round(sum(chunk) / len(chunk), 1))
    return averages


def build_trends(entries: Sequence, window: int = 3) -> dict:
    """Build both chart series from *entries* given newest first."""
    chronological = list(reversed(entries))

    points = [
        {
            'id': entry.id,
            'created_at': entry.created_at.isoformat(),
            'day': entry.created_at.strftime('%a'),
            'mood': entry.mood,
            'mood_score': mood_score(entry.mood),
            'stress': entry.stress,
        }
        for entry in chronological
    ]
    moods = [point['mood_score'] for point in points]
    stress = [point['stress'] for point in points]

    return {
        'count': len(points),
        'window': window,
        'points': points,
        'average_mood': _average(moods),
        'average_stress': _average(stress),
        'rolling_mood': rolling_average(moods, window),
        'rolling_stress': rolling_average(stress, window),
    }

from enum import Enum
from typing import Optional


class Mood(str, Enum):
    """Mood labels the analysis model may assign to an entry."""

    HAPPY = 'happy'
    SAD = 'sad'
    ANXIOUS = 'anxious'
    CALM = 'calm'
    EXCITED = 'excited'
    FRUSTRATED = 'frustrated'
    PEACEFUL = 'peaceful'
    STRESSED = 'stressed'

    @classmethod
    def parse(cls, value) -> Optional['Mood']:
        """Return the matching mood for *value*, or None if it is not in the vocabulary."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Assigned when the model gives no usable mood.
FALLBACK_MOOD = 'neutral'

# Position of each mood on a 1-10 wellbeing scale, used for charting.
MOOD_SCORES = {
    Mood.HAPPY: 9,
    Mood.EXCITED: 8,
    Mood.PEACEFUL: 7,
    Mood.CALM: 6,
    Mood.FRUSTRATED: 4,
    Mood.ANXIOUS: 3,
    Mood.SAD: 2,
    Mood.STRESSED: 1,
}

NEUTRAL_SCORE = 5


def mood_score(mood) -> int:
    parsed = Mood.parse(mood)
    if parsed is None:
        return NEUTRAL_SCORE
    return MOOD_SCORES[parsed]

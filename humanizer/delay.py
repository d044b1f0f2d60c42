"""Typing-delay math for chat bubbles.

Pure functions only: the plan carries the numbers, a sender does the waiting.
"""

from __future__ import annotations

import math

from humanizer.models import DelayConfig
from humanizer.modes import (
    ANXIOUS,
    EXCITED,
    FRUSTRATED,
    SKEPTICAL_EMOTION,
    normalize_emotion,
)

# Pause between one bubble's typing-stop and the next bubble's typing-start.
INTER_BUBBLE_PAUSE_MS = 250


def resolve_multiplier(emotion: str, delay: DelayConfig) -> float:
    """Cadence multiplier for an emotion.

    Anxious leads get faster replies (0.6 by default), skeptical ones a
    slower, more deliberate pace (1.15). Anything else types at 1.0.
    """
    multipliers = {
        ANXIOUS: delay.anxious_multiplier,
        SKEPTICAL_EMOTION: delay.skeptical_multiplier,
        FRUSTRATED: delay.frustrated_multiplier,
        EXCITED: delay.excited_multiplier,
    }
    return multipliers.get(normalize_emotion(emotion), 1.0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def delay_ms(text: str, delay: DelayConfig, multiplier: float = 1.0) -> int:
    """Milliseconds of "typing" before a bubble is sent.

    base + len * per_char, clamped to [base, cap], scaled by multiplier.
    Never below 1ms, even for empty text.
    """
    length = len((text or '').strip())
    raw = delay.base + length * delay.per_char
    clamped = max(delay.base, min(delay.cap, raw))
    return max(1, _round_half_up(clamped * multiplier))

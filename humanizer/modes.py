"""Classifier-token normalization and response-mode selection.

Classifiers upstream send free-form strings. They are folded into closed
token sets here, once; everything downstream compares by exact membership.
"""

from __future__ import annotations

from humanizer.models import (
    BRAVO,
    BUDGET,
    FIRST_CONTACT,
    HOT_CTA,
    SINGLE,
    SKEPTICAL,
    TWO_BUBBLES,
)

# Stages
COLD = 'cold'
WARM = 'warm'
HOT = 'hot'
UNKNOWN = 'unknown'

# Emotions
NEUTRAL = 'neutral'
ANXIOUS = 'anxious'
SKEPTICAL_EMOTION = 'skeptical'
FRUSTRATED = 'frustrated'
EXCITED = 'excited'

EMOTIONS = frozenset({NEUTRAL, ANXIOUS, SKEPTICAL_EMOTION, FRUSTRATED, EXCITED})

# Intentions
PRIMEIRO_CONTATO = 'primeiro_contato'
CLIENTE_BRAVO = 'cliente_bravo'
ORCAMENTO = 'orcamento'
AGENDAMENTO = 'agendamento'
OUTROS = 'outros'

INTENTIONS = frozenset({PRIMEIRO_CONTATO, CLIENTE_BRAVO, ORCAMENTO, AGENDAMENTO, OUTROS})


def _token(value: object) -> str:
    return str(value or '').strip().lower()


def normalize_stage(stage: object) -> str:
    """Map a funnel label to cold/warm/hot/unknown.

    Substring match: CRM labels look like "lead_hot" or "Warm (2 dias)".
    """
    s = _token(stage)
    if COLD in s:
        return COLD
    if WARM in s:
        return WARM
    if HOT in s:
        return HOT
    return UNKNOWN


def normalize_emotion(emotion: object) -> str:
    e = _token(emotion)
    return e if e in EMOTIONS else NEUTRAL


def normalize_intention(intention: object) -> str:
    i = _token(intention)
    return i if i in INTENTIONS else OUTROS


def pick_mode(intention: object, emotion: object, stage: object) -> str:
    """First match wins. Intention triggers outrank stage and emotion."""
    intention = normalize_intention(intention)
    emotion = normalize_emotion(emotion)
    stage = normalize_stage(stage)

    if intention == PRIMEIRO_CONTATO:
        return FIRST_CONTACT
    if intention == CLIENTE_BRAVO:
        return BRAVO
    if intention == ORCAMENTO:
        return BUDGET

    if stage == HOT:
        return HOT_CTA
    if emotion == SKEPTICAL_EMOTION:
        return SKEPTICAL
    if emotion == ANXIOUS or intention == AGENDAMENTO:
        return SINGLE

    return TWO_BUBBLES

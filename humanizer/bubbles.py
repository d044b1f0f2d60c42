"""Bubble pipeline: build from mode/templates, enforce caps, apply state tweaks.

Each stage takes a list of bubbles and returns a new list; nothing is
mutated in place, so the stages can be composed and tested one by one.
"""

from __future__ import annotations

from humanizer.models import SINGLE, ModesConfig, RulesConfig
from humanizer.modes import (
    ANXIOUS,
    COLD,
    HOT,
    SKEPTICAL_EMOTION,
    normalize_emotion,
    normalize_stage,
)
from humanizer.text import (
    ensure_question_at_end,
    normalize_whitespace,
    split_into_sentences,
    strip_too_many_emojis,
)

DEFAULT_CLARIFYING_BUBBLE = 'Perfeito! Me conta rapidinho: qual seu objetivo hoje? 😊'
SCENARIO_PROMPT = 'Me conta um pouco do seu cenário.'

TRUST_DISCLAIMER = 'Sem promessas mágicas: eu te mostro exemplo real antes.'
ANXIOUS_QUESTION = 'Me diz em 1 frase o que você precisa agora?'
PROOF_QUESTION = 'Quer que eu te mande um exemplo rápido?'
SCHEDULING_QUESTION = 'Bora marcar 15 min pra eu te mostrar o caminho? Hoje ou amanhã?'
CONTEXT_QUESTION = 'Me conta rapidinho seu cenário?'

# Sentences per generated bubble, before the configured caps apply.
_LEAD_SENTENCES = 2


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_bubbles(mode: str, modes: ModesConfig, raw_text: str) -> list[str]:
    """Candidate bubbles for a mode. A non-empty operator template wins outright."""
    template = modes.template_for(mode)
    if template:
        return list(template)

    sentences = split_into_sentences(raw_text)
    if not sentences:
        return [DEFAULT_CLARIFYING_BUBBLE]

    lead = strip_too_many_emojis(' '.join(sentences[:_LEAD_SENTENCES]), 1)
    if mode == SINGLE:
        return [lead]

    rest = strip_too_many_emojis(' '.join(sentences[_LEAD_SENTENCES:]), 1).strip()
    follow_up = ensure_question_at_end(rest or SCENARIO_PROMPT, modes.default_question)
    return [b for b in (lead, follow_up) if b]


# ---------------------------------------------------------------------------
# Rule enforcer
# ---------------------------------------------------------------------------

def enforce(bubbles: list[str], rules: RulesConfig) -> list[str]:
    """Cap bubble count, sentences per bubble and emoji per bubble.

    Emoji are capped before the sentence split: dropping "😀" from "Oi.😀 Tudo"
    opens a new sentence boundary. Bubbles left blank are dropped.
    """
    kept = [normalize_whitespace(b) for b in bubbles]
    kept = [b for b in kept if b][:rules.max_bubbles]

    out = []
    for bubble in kept:
        bubble = strip_too_many_emojis(bubble, rules.max_emoji_per_bubble)
        sentences = split_into_sentences(bubble)
        bubble = ' '.join(sentences[:rules.max_sentences_per_bubble])
        if bubble:
            out.append(bubble)
    return out


# ---------------------------------------------------------------------------
# Stage / emotion tweaks
# ---------------------------------------------------------------------------

def closing_question(stage: str, emotion: str) -> str | None:
    """The question the last bubble must end with, if any.

    Only one is forced; precedence is anxious, skeptical, hot, cold.
    """
    emotion = normalize_emotion(emotion)
    stage = normalize_stage(stage)
    if emotion == ANXIOUS:
        return ANXIOUS_QUESTION
    if emotion == SKEPTICAL_EMOTION:
        return PROOF_QUESTION
    if stage == HOT:
        return SCHEDULING_QUESTION
    if stage == COLD:
        return CONTEXT_QUESTION
    return None


def _end_with(text: str, question: str, sep: str) -> str:
    t = text.strip()
    if not t:
        return question
    if t.endswith(question):
        return t
    return f'{t}{sep}{question}'


def tweak(bubbles: list[str], stage: str, emotion: str) -> list[str]:
    """Apply emotion/stage mutations. Never adds bubbles.

    The forced closing question may push the last bubble past the sentence
    and emoji caps.
    """
    out = list(bubbles)
    if not out:
        return out

    emotion = normalize_emotion(emotion)

    if emotion == SKEPTICAL_EMOTION:
        out[0] = f'{TRUST_DISCLAIMER}\n\n{out[0]}'

    if emotion == ANXIOUS:
        out[-1] = ' '.join(out[-1].split())

    question = closing_question(stage, emotion)
    if question:
        sep = ' ' if emotion == ANXIOUS else '\n\n'
        out[-1] = _end_with(out[-1], question, sep)

    return out

"""Plan assembly: raw AI answer + classifier tokens -> timed MessagePlan.

build_plan() is pure given a resolved config. humanize() is the async
entry point used by the conversation handler and the preview server; it
resolves config through a ConfigStore, which never raises.
"""

from __future__ import annotations

import logging

from humanizer.bubbles import DEFAULT_CLARIFYING_BUBBLE, build_bubbles, enforce, tweak
from humanizer.config_store import ConfigStore
from humanizer.delay import INTER_BUBBLE_PAUSE_MS, delay_ms, resolve_multiplier
from humanizer.models import (
    TYPING_START,
    TYPING_STOP,
    HumanizerConfig,
    MessagePlan,
    PlanMeta,
    TextItem,
    TypingItem,
)
from humanizer.modes import (
    normalize_emotion,
    normalize_intention,
    normalize_stage,
    pick_mode,
)

log = logging.getLogger(__name__)


def build_plan(
    config: HumanizerConfig,
    ai_text: str,
    emotion: str,
    intention: str,
    stage: str,
) -> MessagePlan:
    """Build the typing/text plan for one answer. Always has at least one bubble."""
    mode = pick_mode(intention, emotion, stage)

    bubbles = build_bubbles(mode, config.modes, ai_text)
    bubbles = enforce(bubbles, config.rules)
    if not bubbles:
        # e.g. an emoji-only template under maxEmojiPerBubble=0
        log.warning('Mode %s produced no bubbles after enforcement; using default', mode)
        bubbles = enforce([DEFAULT_CLARIFYING_BUBBLE], config.rules)
    bubbles = tweak(bubbles, stage, emotion)

    multiplier = resolve_multiplier(emotion, config.delay)

    items: list[TypingItem | TextItem] = []
    for i, text in enumerate(bubbles):
        items.append(TypingItem(TYPING_START, 0 if i == 0 else INTER_BUBBLE_PAUSE_MS))
        items.append(TextItem(text, delay_ms(text, config.delay, multiplier)))
        items.append(TypingItem(TYPING_STOP, 0))

    meta = PlanMeta(
        mode=mode,
        emotion=normalize_emotion(emotion),
        intention=normalize_intention(intention),
        stage=normalize_stage(stage),
    )
    log.debug(
        'Built plan: mode=%s bubbles=%d multiplier=%.2f', mode, len(bubbles), multiplier,
    )
    return MessagePlan(items=tuple(items), bubbles=tuple(bubbles), meta=meta)


async def humanize(
    store: ConfigStore,
    ai_text: str,
    emotion: str,
    intention: str,
    stage: str,
) -> MessagePlan:
    """Resolve config (DEFAULTS on any failure) and build the plan."""
    config = await store.get_config()
    return build_plan(config, ai_text, emotion, intention, stage)

"""Humanizer data structures: engine config, response modes, message plans.

Config JSON keeps the camelCase keys the dashboard writes
(maxBubbles, perChar, ...). Everything here is frozen: a resolved
config is shared by every plan built while it is cached.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class HumanizerError(Exception):
    """Base class for humanizer errors."""


class ConfigFetchError(HumanizerError):
    """Settings backend unreachable or answered with an error."""


class ConfigShapeError(HumanizerError):
    """Stored config is not valid JSON or does not fit HumanizerConfig."""


# ---------------------------------------------------------------------------
# Response modes
# ---------------------------------------------------------------------------

FIRST_CONTACT = 'FIRST_CONTACT'
BRAVO = 'BRAVO'
BUDGET = 'BUDGET'
HOT_CTA = 'HOT_CTA'
SKEPTICAL = 'SKEPTICAL'
SINGLE = 'SINGLE'
TWO_BUBBLES = 'TWO_BUBBLES'

RESPONSE_MODES = frozenset({
    FIRST_CONTACT, BRAVO, BUDGET, HOT_CTA, SKEPTICAL, SINGLE, TWO_BUBBLES,
})

DEFAULT_QUESTION = 'Qual é sua meta principal hoje?'


# ---------------------------------------------------------------------------
# Config sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RulesConfig:
    """Hard caps applied to every bubble list."""

    max_bubbles: int = 2
    max_sentences_per_bubble: int = 2
    max_emoji_per_bubble: int = 1
    default_question: str = DEFAULT_QUESTION

    @staticmethod
    def from_dict(d: dict) -> RulesConfig:
        return RulesConfig(
            max_bubbles=_int_field(d, 'maxBubbles', minimum=1),
            max_sentences_per_bubble=_int_field(d, 'maxSentencesPerBubble', minimum=1),
            max_emoji_per_bubble=_int_field(d, 'maxEmojiPerBubble', minimum=0),
            default_question=_str_field(d, 'defaultQuestion'),
        )

    def to_dict(self) -> dict:
        return {
            'maxBubbles': self.max_bubbles,
            'maxSentencesPerBubble': self.max_sentences_per_bubble,
            'maxEmojiPerBubble': self.max_emoji_per_bubble,
            'defaultQuestion': self.default_question,
        }


@dataclass(frozen=True)
class DelayConfig:
    """Typing-delay parameters (milliseconds) and per-emotion multipliers."""

    base: float = 450
    per_char: float = 12
    cap: float = 2000
    anxious_multiplier: float = 0.6
    skeptical_multiplier: float = 1.15
    frustrated_multiplier: float = 1.0
    excited_multiplier: float = 0.9

    @staticmethod
    def from_dict(d: dict) -> DelayConfig:
        cfg = DelayConfig(
            base=_number_field(d, 'base'),
            per_char=_number_field(d, 'perChar'),
            cap=_number_field(d, 'cap'),
            anxious_multiplier=_number_field(d, 'anxiousMultiplier'),
            skeptical_multiplier=_number_field(d, 'skepticalMultiplier'),
            frustrated_multiplier=_number_field(d, 'frustratedMultiplier'),
            excited_multiplier=_number_field(d, 'excitedMultiplier'),
        )
        if cfg.base <= 0:
            raise ConfigShapeError('delay.base must be > 0')
        if cfg.cap < cfg.base:
            raise ConfigShapeError('delay.cap must be >= delay.base')
        if cfg.per_char < 0:
            raise ConfigShapeError('delay.perChar must be >= 0')
        for name in ('anxious', 'skeptical', 'frustrated', 'excited'):
            if getattr(cfg, f'{name}_multiplier') <= 0:
                raise ConfigShapeError(f'delay.{name}Multiplier must be > 0')
        return cfg

    def to_dict(self) -> dict:
        return {
            'base': self.base,
            'perChar': self.per_char,
            'cap': self.cap,
            'anxiousMultiplier': self.anxious_multiplier,
            'skepticalMultiplier': self.skeptical_multiplier,
            'frustratedMultiplier': self.frustrated_multiplier,
            'excitedMultiplier': self.excited_multiplier,
        }


@dataclass(frozen=True)
class ModesConfig:
    """Operator templates per response mode, plus the builder's fallback question."""

    # Read-only; excluded from the hash.
    templates: Mapping[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
    default_question: str = DEFAULT_QUESTION

    def __post_init__(self) -> None:
        frozen = {mode: tuple(b) for mode, b in self.templates.items()}
        object.__setattr__(self, 'templates', MappingProxyType(frozen))

    def template_for(self, mode: str) -> tuple[str, ...]:
        return self.templates.get(mode, ())

    @staticmethod
    def from_dict(d: dict) -> ModesConfig:
        raw_templates = d.get('templates')
        if raw_templates is None:
            raw_templates = {}
        if not isinstance(raw_templates, dict):
            raise ConfigShapeError('modes.templates must be an object')

        templates: dict[str, tuple[str, ...]] = {}
        for mode, bubbles in raw_templates.items():
            if mode not in RESPONSE_MODES:
                log.warning('Ignoring template for unknown mode %r', mode)
                continue
            if not isinstance(bubbles, list) or not all(isinstance(b, str) for b in bubbles):
                raise ConfigShapeError(f'modes.templates.{mode} must be a list of strings')
            templates[mode] = tuple(bubbles)

        rules = d.get('rules')
        if not isinstance(rules, dict):
            raise ConfigShapeError('modes.rules must be an object')

        return ModesConfig(
            templates=templates,
            default_question=_str_field(rules, 'defaultQuestion'),
        )

    def to_dict(self) -> dict:
        return {
            'templates': {mode: list(b) for mode, b in self.templates.items()},
            'rules': {'defaultQuestion': self.default_question},
        }


@dataclass(frozen=True)
class HumanizerConfig:
    """Fully-populated engine config. Build with from_dict() or use DEFAULTS."""

    rules: RulesConfig = field(default_factory=RulesConfig)
    delay: DelayConfig = field(default_factory=DelayConfig)
    modes: ModesConfig = field(default_factory=ModesConfig)

    @staticmethod
    def from_dict(d: dict) -> HumanizerConfig:
        """Deep-merge d onto DEFAULTS and validate. Raises ConfigShapeError."""
        if not isinstance(d, dict):
            raise ConfigShapeError(f'config must be a JSON object, got {type(d).__name__}')

        # Older dashboard builds wrap the payload as {"humanizer": {...}}.
        if isinstance(d.get('humanizer'), dict) and not d.keys() & {'rules', 'delay', 'modes'}:
            d = d['humanizer']

        merged = deep_merge(DEFAULTS.to_dict(), d)
        for section in ('rules', 'delay', 'modes'):
            if not isinstance(merged[section], dict):
                raise ConfigShapeError(f'{section} must be an object')

        return HumanizerConfig(
            rules=RulesConfig.from_dict(merged['rules']),
            delay=DelayConfig.from_dict(merged['delay']),
            modes=ModesConfig.from_dict(merged['modes']),
        )

    def to_dict(self) -> dict:
        return {
            'rules': self.rules.to_dict(),
            'delay': self.delay.to_dict(),
            'modes': self.modes.to_dict(),
        }


DEFAULTS = HumanizerConfig()


def deep_merge(base: dict, override: dict) -> dict:
    """Return a new dict: override's leaves on top of base, recursing into dicts."""
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def _int_field(d: dict, key: str, minimum: int) -> int:
    value = d.get(key)
    # bool is an int subclass; "true" is not a bubble count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigShapeError(f'{key} must be an integer, got {value!r}')
    if value < minimum:
        raise ConfigShapeError(f'{key} must be >= {minimum}, got {value}')
    return value


def _number_field(d: dict, key: str) -> float:
    value = d.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigShapeError(f'delay.{key} must be a number, got {value!r}')
    if not math.isfinite(value):
        raise ConfigShapeError(f'delay.{key} must be finite')
    return value


def _str_field(d: dict, key: str) -> str:
    value = d.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigShapeError(f'{key} must be a non-empty string')
    return value


# ---------------------------------------------------------------------------
# Message plan
# ---------------------------------------------------------------------------

TYPING_START = 'start'
TYPING_STOP = 'stop'


@dataclass(frozen=True)
class TypingItem:
    """Toggle the typing indicator after waiting delay_ms."""

    action: str  # start | stop
    delay_ms: int

    type = 'typing'

    def to_dict(self) -> dict:
        return {'type': self.type, 'action': self.action, 'delayMs': self.delay_ms}


@dataclass(frozen=True)
class TextItem:
    """Send one chat bubble after waiting delay_ms."""

    text: str
    delay_ms: int

    type = 'text'

    def to_dict(self) -> dict:
        return {'type': self.type, 'text': self.text, 'delayMs': self.delay_ms}


@dataclass(frozen=True)
class PlanMeta:
    mode: str
    emotion: str
    intention: str
    stage: str

    def to_dict(self) -> dict:
        return {
            'mode': self.mode,
            'emotion': self.emotion,
            'intention': self.intention,
            'stage': self.stage,
        }


@dataclass(frozen=True)
class MessagePlan:
    """Ordered typing/text actions for one answer.

    items is canonical: execute strictly in order, sleeping delay_ms before
    each side effect. bubbles is always populated for senders that can only
    send a single message.
    """

    items: tuple[TypingItem | TextItem, ...]
    bubbles: tuple[str, ...]
    meta: PlanMeta

    def text_items(self) -> list[TextItem]:
        return [item for item in self.items if isinstance(item, TextItem)]

    def joined_text(self, sep: str = '\n\n') -> str:
        """All bubbles as one message, for single-message senders."""
        return sep.join(self.bubbles)

    def first_bubble(self) -> str:
        return self.bubbles[0] if self.bubbles else ''

    def to_dict(self) -> dict:
        return {
            'items': [item.to_dict() for item in self.items],
            'bubbles': list(self.bubbles),
            'meta': self.meta.to_dict(),
        }

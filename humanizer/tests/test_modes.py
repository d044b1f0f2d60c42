"""Tests for token normalization and response-mode selection.

Run: python -m pytest humanizer/tests/test_modes.py -v
"""

from __future__ import annotations

import pytest

from humanizer.models import (
    BRAVO,
    BUDGET,
    FIRST_CONTACT,
    HOT_CTA,
    RESPONSE_MODES,
    SINGLE,
    SKEPTICAL,
    TWO_BUBBLES,
)
from humanizer.modes import (
    normalize_emotion,
    normalize_intention,
    normalize_stage,
    pick_mode,
)


class TestNormalizeStage:

    @pytest.mark.parametrize('raw,expected', [
        ('cold', 'cold'),
        ('Lead_Hot', 'hot'),
        ('  WARM (2 dias) ', 'warm'),
        ('', 'unknown'),
        (None, 'unknown'),
        ('qualificado', 'unknown'),
    ])
    def test_substring_tolerant(self, raw: object, expected: str) -> None:
        assert normalize_stage(raw) == expected


class TestNormalizeTokens:

    def test_known_emotion_is_lowercased(self) -> None:
        assert normalize_emotion(' Skeptical ') == 'skeptical'

    def test_unknown_emotion_is_neutral(self) -> None:
        assert normalize_emotion('melancholic') == 'neutral'
        assert normalize_emotion(None) == 'neutral'

    def test_unknown_intention_is_outros(self) -> None:
        assert normalize_intention('duvida_tecnica') == 'outros'
        assert normalize_intention('ORCAMENTO') == 'orcamento'


class TestPickMode:

    def test_first_contact(self) -> None:
        assert pick_mode('primeiro_contato', 'neutral', 'cold') == FIRST_CONTACT

    def test_bravo(self) -> None:
        assert pick_mode('cliente_bravo', 'frustrated', 'warm') == BRAVO

    def test_budget(self) -> None:
        assert pick_mode('orcamento', 'anxious', 'hot') == BUDGET

    def test_hot_stage(self) -> None:
        assert pick_mode('outros', 'skeptical', 'hot') == HOT_CTA

    def test_skeptical(self) -> None:
        assert pick_mode('outros', 'skeptical', 'warm') == SKEPTICAL

    def test_anxious_is_single(self) -> None:
        assert pick_mode('outros', 'anxious', 'cold') == SINGLE

    def test_scheduling_is_single(self) -> None:
        assert pick_mode('agendamento', 'neutral', 'unknown') == SINGLE

    def test_default_two_bubbles(self) -> None:
        assert pick_mode('outros', 'neutral', 'warm') == TWO_BUBBLES

    def test_intention_outranks_stage_and_emotion(self) -> None:
        """primeiro_contato wins even for a hot, skeptical lead."""
        assert pick_mode('primeiro_contato', 'skeptical', 'hot') == FIRST_CONTACT

    def test_unrecognized_inputs_fall_to_default(self) -> None:
        assert pick_mode('???', 'whatever', 'stage-x') == TWO_BUBBLES

    def test_deterministic_and_closed(self) -> None:
        intentions = ['primeiro_contato', 'cliente_bravo', 'orcamento', 'agendamento', 'outros', 'x']
        emotions = ['neutral', 'anxious', 'skeptical', 'frustrated', 'excited', 'y']
        stages = ['cold', 'warm', 'hot', 'unknown', 'z']
        for i in intentions:
            for e in emotions:
                for s in stages:
                    mode = pick_mode(i, e, s)
                    assert mode in RESPONSE_MODES
                    assert pick_mode(i, e, s) == mode

"""Low-level text helpers: whitespace, sentences, emoji caps, trailing questions.

No dependency on config or any other humanizer module.
"""

from __future__ import annotations

import re

# Extended pictographic code points, including the text-default ones that
# render as emoji when followed by U+FE0F (arrows, play buttons, (c), TM).
_PICTOGRAPH = (
    '['
    '\U0001F000-\U0001FAFF'  # symbols & pictographs, emoticons, transport
    '\u2300-\u23FF'  # misc technical (watch, alarm clock)
    '\u2600-\u27BF'  # misc symbols, dingbats (sun, check mark, heart)
    '\u2B00-\u2BFF'  # arrows, stars
    '\u00A9\u00AE\u203C\u2049\u2122\u2139'
    '\u2194-\u2199\u21A9\u21AA\u2934\u2935'
    '\u24C2\u25AA\u25AB\u25B6\u25C0\u25FB-\u25FE'
    '\u3030\u303D\u3297\u3299'
    ']'
)
# One emoji with its variation selector and skin tone, so removing it leaves
# no orphan U+FE0F or bare modifier behind.
_SINGLE_EMOJI = _PICTOGRAPH + '\uFE0F?[\U0001F3FB-\U0001F3FF]?'

_EMOJI_RE = re.compile(
    '[\U0001F1E6-\U0001F1FF]{2}'  # flag: pair of regional indicators
    '|[#*0-9]\uFE0F?\u20E3'  # keycap
    f'|{_SINGLE_EMOJI}(?:\u200D{_SINGLE_EMOJI})*'  # ZWJ sequence counts once
)
_SENTENCE_BOUNDARY_RE = re.compile(r'(?<=[.!?])\s+')
_HSPACE_BEFORE_NEWLINE_RE = re.compile(r'[^\S\n]+\n')
_HSPACE_RUN_RE = re.compile(r'[^\S\n]+')
_MANY_NEWLINES_RE = re.compile(r'\n{3,}')


def normalize_whitespace(text: str) -> str:
    """Collapse horizontal runs to one space, 3+ newlines to a blank line, trim."""
    t = (text or '').replace('\r', '')
    t = _HSPACE_BEFORE_NEWLINE_RE.sub('\n', t)
    t = _MANY_NEWLINES_RE.sub('\n\n', t)
    t = _HSPACE_RUN_RE.sub(' ', t)
    return t.strip()


def split_into_sentences(text: str) -> list[str]:
    t = normalize_whitespace(text)
    if not t:
        return []
    parts = [p.strip() for p in _SENTENCE_BOUNDARY_RE.split(t)]
    parts = [p for p in parts if p]
    return parts or [t]


def count_emojis(text: str) -> int:
    return len(_EMOJI_RE.findall(text or ''))


def strip_too_many_emojis(text: str, max_emojis: int = 1) -> str:
    """Remove the earliest emojis until at most max_emojis remain.

    Text already at or under the cap is returned untouched.
    """
    if count_emojis(text) <= max_emojis:
        return text

    remove = count_emojis(text) - max_emojis

    def _drop(match: re.Match) -> str:
        nonlocal remove
        if remove <= 0:
            return match.group(0)
        remove -= 1
        return ''

    return normalize_whitespace(_EMOJI_RE.sub(_drop, text))


def ensure_question_at_end(text: str, fallback_question: str) -> str:
    """Append fallback_question after a blank line unless text already asks something."""
    t = (text or '').strip()
    if not t:
        return fallback_question
    if '?' in t:
        return t
    return f'{t}\n\n{fallback_question}'

"""Keyword and fact extraction used to tag observations automatically."""

from __future__ import annotations

MAX_CONCEPTS = 8
MIN_WORD_LENGTH = 3
MIN_FACT_LENGTH = 20
DEFAULT_KEYWORD_LIMIT = 6

STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for of with by from as is was are were be been
    being have has had do does did will would could should may might can shall must
    not no nor so if then than that this these those it its my your his her our their
    we they them us he she who which what when where how all each every both few more
    most other some such only own same into over after before between under again
    further once also just about very there here out up down off any because through
    during above below while using used
    """.split()
)

_LONG_SUFFIXES = (
    "tion", "sion", "ment", "ness", "ance", "ence", "ible", "able", "ious", "eous",
)
_SHORT_SUFFIXES = ("ing", "ted", "ied", "ies", "ers", "est")


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _stem(word: str) -> str:
    """Strip a common English suffix from a word."""
    w = word.lower()
    if _byte_len(w) < 5:
        return w
    for suffix in _LONG_SUFFIXES + _SHORT_SUFFIXES:
        if w.endswith(suffix):
            return w[: -len(suffix)]
    if w.endswith("ed") and _byte_len(w[:-2]) > 2:
        return w[:-2]
    if w.endswith("s") and not w.endswith("ss") and _byte_len(w) > 4:
        return w[:-1]
    return w


def _tokenize(text: str) -> list[str]:
    """Split text into lowercase words of at least MIN_WORD_LENGTH bytes."""
    tokens: list[str] = []
    current: list[str] = []
    for ch in text + " ":
        if ch.isalnum() or ch in "-_":
            current.append(ch)
            continue
        if current:
            word = "".join(current).lower()
            if _byte_len(word) >= MIN_WORD_LENGTH:
                tokens.append(word)
            current = []
    return tokens


def extract_keywords(text: str, limit: int = DEFAULT_KEYWORD_LIMIT) -> list[str]:
    """Return up to ``limit`` (at most 8) of the most frequent non-stop words."""
    if not text:
        return []

    counts: dict[str, list] = {}
    for token in _tokenize(text):
        if token in STOP_WORDS:
            continue
        stemmed = _stem(token)
        if stemmed in STOP_WORDS:
            continue
        entry = counts.setdefault(stemmed, [0, token])
        entry[0] += 1

    ranked = sorted(counts.values(), key=lambda item: item[0], reverse=True)
    return [original for _, original in ranked[: min(limit, MAX_CONCEPTS)]]


def extract_facts(text: str, limit: int) -> list[str]:
    """Return up to ``limit`` declarative sentences from the text.

    Questions, short fragments and TODO/FIXME task markers are skipped.
    """
    facts: list[str] = []
    for sentence in text.split("."):
        if len(facts) >= limit:
            break
        s = sentence.strip()
        if (
            _byte_len(s) < MIN_FACT_LENGTH
            or s.endswith("?")
            or s.startswith("TODO")
            or s.startswith("FIXME")
        ):
            continue
        facts.append(s if s.endswith(".") else f"{s}.")
    return facts
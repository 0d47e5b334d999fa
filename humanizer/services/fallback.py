"""
Local Rule-Based Rewriter

The last link in the rewrite chain. Pure, synchronous, and always
available: no credentials, no network, no failure modes.

PASSES (APPLIED IN ORDER):
1. Transitions   - formal sentence-initial connectors -> casual ones
2. Phrases       - wordy stock phrases -> plain ones
3. Words         - AI-writing cliches -> plain synonyms
4. Contractions  - "it is" -> "it's", "do not" -> "don't", ...
5. Openers       - stiff sentence openers -> looser ones
6. Fillers       - interjections after sentence boundaries (rng only)

RANDOMNESS CONTRACT:
- Passes 1-4 are always deterministic. Randomness never changes which
  word replaces which.
- rng=None: no filler injection, every opener takes its first variant.
  Output is a pure function of (text, strength).
- rng=random.Random(seed): fillers and opener variants drawn from rng.
  Same seed + same input -> same output.

The output always differs from the input. If none of the passes touched
the text, a deterministic opener is added to the first sentence.
"""

import random
import re
from typing import Optional, Sequence

from ..models.schemas import HumanizationOptions
from .options import strength_band


# =============================================================================
# SUBSTITUTION TABLES
# =============================================================================

# Sentence-initial connectors. Matched case-sensitively after a sentence
# boundary (or at the very start) so mid-sentence usage is left alone.
TRANSITIONS: list[tuple[str, str]] = [
    ("In today's fast-paced world,", "These days,"),
    ("In today's world,", "These days,"),
    ("First and foremost,", "First off,"),
    ("On the other hand,", "Then again,"),
    ("In conclusion,", "All in all,"),
    ("In summary,", "To sum up,"),
    ("As a result,", "Because of that,"),
    ("In addition,", "Also,"),
    ("Additionally,", "Also,"),
    ("Furthermore,", "Plus,"),
    ("Moreover,", "On top of that,"),
    ("Consequently,", "So,"),
    ("Therefore,", "So,"),
    ("Thus,", "So,"),
    ("Nevertheless,", "Still,"),
    ("Nonetheless,", "Still,"),
    ("Ultimately,", "In the end,"),
    ("However,", "But"),
]

PHRASES: list[tuple[str, str]] = [
    ("it is important to note that", "keep in mind that"),
    ("it should be noted that", "keep in mind that"),
    ("due to the fact that", "because"),
    ("at this point in time", "now"),
    ("in the event that", "if"),
    ("a large number of", "a lot of"),
    ("a plethora of", "plenty of"),
    ("a myriad of", "plenty of"),
    ("in order to", "to"),
    ("with regard to", "about"),
    ("prior to", "before"),
    ("delve into", "dig into"),
    ("in terms of", "when it comes to"),
]

WORDS: list[tuple[str, str]] = [
    ("utilization", "use"),
    ("utilizing", "using"),
    ("utilized", "used"),
    ("utilizes", "uses"),
    ("utilize", "use"),
    ("subsequently", "then"),
    ("nevertheless", "still"),
    ("additionally", "also"),
    ("furthermore", "plus"),
    ("moreover", "also"),
    ("consequently", "so"),
    ("therefore", "so"),
    ("commence", "start"),
    ("facilitate", "help"),
    ("demonstrate", "show"),
    ("demonstrates", "shows"),
    ("endeavor", "try"),
    ("numerous", "many"),
    ("approximately", "about"),
    ("sufficient", "enough"),
    ("obtain", "get"),
    ("purchase", "buy"),
    ("assist", "help"),
    ("leverage", "use"),
    ("paramount", "key"),
    ("pivotal", "key"),
    ("crucial", "important"),
    ("comprehensive", "thorough"),
    ("seamlessly", "smoothly"),
]

# (pattern, replacement). Only contracted when another word follows, so a
# clause-final "that is." stays intact.
CONTRACTIONS: list[tuple[str, str]] = [
    (r"\b([Ii])t is(?=\s+\w)", r"\1t's"),
    (r"\b([Tt])hat is(?=\s+\w)", r"\1hat's"),
    (r"\b([Tt])here is(?=\s+\w)", r"\1here's"),
    (r"\b([Yy])ou are(?=\s+\w)", r"\1ou're"),
    (r"\b([Ww])e are(?=\s+\w)", r"\1e're"),
    (r"\b([Tt])hey are(?=\s+\w)", r"\1hey're"),
    (r"\bI am(?=\s+\w)", "I'm"),
    (r"\b([Dd])o not\b", r"\1on't"),
    (r"\b([Dd])oes not\b", r"\1oesn't"),
    (r"\b([Dd])id not\b", r"\1idn't"),
    (r"\b([Ii])s not\b", r"\1sn't"),
    (r"\b([Aa])re not\b", r"\1ren't"),
    (r"\b([Ww])as not\b", r"\1asn't"),
    (r"\b([Hh])ave not\b", r"\1aven't"),
    (r"\b([Hh])as not\b", r"\1asn't"),
    (r"\b([Ww])ill not\b", r"\1on't"),
    (r"\b([Ww])ould not\b", r"\1ouldn't"),
    (r"\b([Ss])hould not\b", r"\1houldn't"),
    (r"\b([Cc])ould not\b", r"\1ouldn't"),
    (r"\b([Cc])annot\b", r"\1an't"),
]

OPENERS: list[tuple[str, tuple[str, ...]]] = [
    ("It's clear that ", ("Clearly, ", "Obviously, ")),
    ("It's worth noting that ", ("Worth noting: ", "Funny enough, ")),
    ("Keep in mind that ", ("Just remember, ", "Remember, ")),
    ("There's no doubt that ", ("No doubt, ", "Sure enough, ")),
]

FILLERS: tuple[str, ...] = ("Actually, ", "You know, ", "Honestly, ", "Well, ", "So, ")

# Per-boundary injection probability by strength band
FILLER_PROBABILITY = {"low": 0.0, "medium": 0.1, "high": 0.2}

FORCED_OPENER = "Honestly, "

# Sentence starters safe to lowercase after an inserted opener. Anything
# else (names, places, acronyms) keeps its capital.
COMMON_STARTERS = frozenset({
    "a", "an", "the", "this", "that", "these", "those", "there", "here",
    "it", "its", "it's", "we", "we're", "you", "you're", "they", "they're",
    "he", "she", "our", "your", "their", "my", "his", "her",
    "some", "many", "most", "all", "every", "each", "no", "not", "one",
    "in", "on", "at", "for", "with", "by", "from", "to", "as", "if",
    "when", "while", "after", "before", "because", "but", "and", "so", "also",
    "plus", "still", "then", "now", "what", "how", "why", "who", "which",
    "is", "are", "was", "were", "do", "does", "did", "can", "will",
})

_BOUNDARY = r"(^|[.!?]\s+)"
_SENTENCE_START = re.compile(r"([.!?])(\s+)([A-Z][\w']*)")


# =============================================================================
# HELPERS
# =============================================================================

def _match_case(source: str, replacement: str) -> str:
    """Carry the capitalisation of the matched text over to the replacement."""
    if len(source) > 1 and source.isupper():
        return replacement.upper()
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _lower_first(word: str) -> str:
    """Lowercase a sentence-initial word only if it is a common starter."""
    if word.lower() not in COMMON_STARTERS:
        return word
    if len(word) > 1 and not word[1:].islower():
        return word
    return word[:1].lower() + word[1:]


# =============================================================================
# REWRITER
# =============================================================================

class RuleBasedRewriter:
    """
    Deterministic-by-default text transform.

    Args:
        rng: Optional random source. None disables all randomness.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        self._transitions = [
            (re.compile(_BOUNDARY + re.escape(src) + r"\s*", re.MULTILINE), casual)
            for src, casual in TRANSITIONS
        ]
        self._phrases = [
            (re.compile(rf"\b{re.escape(src)}\b", re.IGNORECASE), plain)
            for src, plain in PHRASES
        ]
        self._words = [
            (re.compile(rf"\b{re.escape(src)}\b", re.IGNORECASE), plain)
            for src, plain in WORDS
        ]
        self._contractions = [(re.compile(p), r) for p, r in CONTRACTIONS]
        self._openers = [
            (re.compile(_BOUNDARY + re.escape(src), re.MULTILINE), choices)
            for src, choices in OPENERS
        ]

    def rewrite(self, text: str, options: Optional[HumanizationOptions] = None) -> str:
        options = options or HumanizationOptions()

        result = self._apply_transitions(text)
        result = self._apply_table(result, self._phrases)
        result = self._apply_table(result, self._words)
        result = self._apply_contractions(result)
        result = self._apply_openers(result)

        probability = FILLER_PROBABILITY[strength_band(options.strength)]
        if self.rng is not None and probability > 0:
            result = self._inject_fillers(result, probability)

        if result == text:
            result = self._force_variation(result)

        return result

    # -------------------------------------------------------------------------
    # Passes
    # -------------------------------------------------------------------------

    def _choose(self, choices: Sequence[str]) -> str:
        if self.rng is None or len(choices) == 1:
            return choices[0]
        return self.rng.choice(list(choices))

    def _apply_transitions(self, text: str) -> str:
        for pattern, casual in self._transitions:
            text = pattern.sub(lambda m, c=casual: f"{m.group(1)}{c} ", text)
        return text

    def _apply_table(self, text: str, table) -> str:
        for pattern, plain in table:
            text = pattern.sub(lambda m, p=plain: _match_case(m.group(0), p), text)
        return text

    def _apply_contractions(self, text: str) -> str:
        for pattern, replacement in self._contractions:
            text = pattern.sub(replacement, text)
        return text

    def _apply_openers(self, text: str) -> str:
        for pattern, choices in self._openers:
            text = pattern.sub(
                lambda m, c=choices: f"{m.group(1)}{self._choose(c)}",
                text
            )
        return text

    def _inject_fillers(self, text: str, probability: float) -> str:
        rng = self.rng

        def inject(match: re.Match) -> str:
            punctuation, space, word = match.groups()
            if rng.random() >= probability:
                return match.group(0)
            filler = rng.choice(FILLERS)
            if word + ", " == filler or filler.startswith(word):
                return match.group(0)
            return f"{punctuation}{space}{filler}{_lower_first(word)}"

        return _SENTENCE_START.sub(inject, text)

    def _force_variation(self, text: str) -> str:
        stripped = text.lstrip()
        leading = text[: len(text) - len(stripped)]
        if not stripped:
            return text + FORCED_OPENER.strip()
        first_word = stripped.split(None, 1)[0]
        if stripped[:1].isupper():
            stripped = _lower_first(first_word) + stripped[len(first_word):]
        return f"{leading}{FORCED_OPENER}{stripped}"

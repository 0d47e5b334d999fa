"""
Prompt Builder for the chat-completion strategy.

The system instruction is composed from three independent directives
(readability, purpose, strength) plus a fixed list of hard requirements.
Pure functions only; no I/O.
"""

from ..models.schemas import HumanizationOptions
from .options import (
    DEFAULT_PURPOSE,
    DEFAULT_READABILITY,
    strength_band,
)


# =============================================================================
# BASE INSTRUCTION
# =============================================================================

BASE_INSTRUCTION = (
    "You are an expert editor who rewrites AI-generated text so it reads as if "
    "a thoughtful human wrote it."
)


# =============================================================================
# READABILITY DIRECTIVES
# =============================================================================

READABILITY_DIRECTIVES = {
    "High School": (
        "Write at a high school reading level: short sentences, everyday "
        "vocabulary, no jargon."
    ),
    "University": (
        "Write at a university reading level: clear and well-structured, with "
        "moderately advanced vocabulary where it fits naturally."
    ),
    "Doctorate": (
        "Write at a doctoral reading level: precise, nuanced and technically "
        "rich, while still sounding like a person rather than a template."
    ),
    "Journalist": (
        "Write like a journalist: punchy, concrete and easy to scan, leading "
        "with what matters most."
    ),
    "Marketing": (
        "Write like a marketer: persuasive, energetic and reader-focused, "
        "without sounding salesy or robotic."
    ),
}


# =============================================================================
# PURPOSE DIRECTIVES
# =============================================================================

PURPOSE_DIRECTIVES = {
    "General Writing": "The text is general-purpose writing for a broad audience.",
    "Academic": (
        "The text is academic writing. Keep claims, citations and terminology "
        "intact and keep a scholarly tone."
    ),
    "Business": (
        "The text is business writing. Keep it professional, direct and "
        "action-oriented."
    ),
    "Creative": (
        "The text is creative writing. Feel free to use vivid imagery and a "
        "distinctive voice."
    ),
    "Technical": (
        "The text is technical writing. Keep every technical term, number and "
        "instruction exact."
    ),
}


# =============================================================================
# STRENGTH DIRECTIVES
# =============================================================================

STRENGTH_DIRECTIVES = {
    "low": (
        "Make light edits only: keep most of the original wording and fix the "
        "phrases that sound most machine-written."
    ),
    "medium": (
        "Make moderate edits: rephrase sentences freely while keeping the "
        "original structure recognisable."
    ),
    "high": (
        "Rewrite thoroughly: restructure sentences and paragraphs as needed so "
        "the result reads naturally human."
    ),
}


# =============================================================================
# HARD REQUIREMENTS (ALWAYS APPENDED)
# =============================================================================

HARD_REQUIREMENTS = (
    "Preserve the original meaning and every fact.",
    "Vary sentence length and structure.",
    "Use contractions and natural idioms where they fit.",
    "Never output the characters [ or ] and never use placeholders.",
    "Return only the rewritten text, with no preamble, notes or quotes.",
)


def readability_directive(readability: str) -> str:
    return READABILITY_DIRECTIVES.get(
        readability, READABILITY_DIRECTIVES[DEFAULT_READABILITY]
    )


def purpose_directive(purpose: str) -> str:
    return PURPOSE_DIRECTIVES.get(purpose, PURPOSE_DIRECTIVES[DEFAULT_PURPOSE])


def strength_directive(strength: float) -> str:
    return STRENGTH_DIRECTIVES[strength_band(strength)]


def build_system_instruction(options: HumanizationOptions) -> str:
    """Compose the full system instruction for one request."""
    requirements = "\n".join(f"- {item}" for item in HARD_REQUIREMENTS)
    return (
        f"{BASE_INSTRUCTION}\n\n"
        f"{readability_directive(options.readability)}\n"
        f"{purpose_directive(options.purpose)}\n"
        f"{strength_directive(options.strength)}\n\n"
        f"Requirements:\n{requirements}"
    )

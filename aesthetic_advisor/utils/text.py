"""
Text normalization helpers shared by answer matching code.

Answers arrive as free-form option labels in Portuguese ("Não", "Sim, muito",
"Não sei identificar"). Every comparison in the engine goes through
``normalize_answer`` so that case, surrounding whitespace, and diacritics
never change the outcome.
"""

from __future__ import annotations

import unicodedata


def normalize_answer(value: object) -> str:
    """Case-fold, strip diacritics and trim whitespace.

    ``None`` normalizes to the empty string; any other non-string value is
    converted with ``str()`` first.

    Examples::

        normalize_answer("  Não sei ")  -> "nao sei"
        normalize_answer("SIM")         -> "sim"
    """
    if value is None:
        return ""
    text = unicodedata.normalize("NFD", str(value))
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return text.casefold().strip()


def starts_with_token(text: str, token: str) -> bool:
    """Return True when ``text`` equals ``token`` or starts with it as a word.

    Both arguments are expected to be normalized already. The character that
    follows the token must not be alphanumeric, so ``"sim"`` matches
    ``"sim, muito"`` but not ``"simples"``.
    """
    if not token or not text.startswith(token):
        return False
    if len(text) == len(token):
        return True
    return not text[len(token)].isalnum()

"""Detection of control phrases ("borrar", "total") in chat lines."""
import re
from typing import Iterable, Optional, Pattern

from apps.order_parser.services.lexicon import collapse_whitespace, fold_text


def build_command_regex(phrases: Iterable[str]) -> Pattern[str]:
    """
    Build one case-insensitive regex matching any of the given phrases.

    Phrases are folded (no case, no diacritics) and escaped, so "Cancelar
    todo" and "cancelar todo" are the same command and "s/." is literal.
    Longer phrases are tried first.

    Args:
        phrases: Literal command phrases

    Returns:
        Compiled pattern to run against folded text
    """
    folded = {collapse_whitespace(fold_text(p)) for p in phrases}
    folded.discard("")
    if not folded:
        raise ValueError("At least one non-empty command phrase is required")
    ordered = sorted(folded, key=len, reverse=True)
    return re.compile("|".join(re.escape(p) for p in ordered), re.IGNORECASE)


class CommandKeywordDetector:
    """Finds which known control phrase, if any, a line contains."""

    def __init__(self, phrases: Iterable[str]):
        """
        Initialize detector.

        Args:
            phrases: Control phrases as they should be reported back
        """
        self.phrases = {collapse_whitespace(fold_text(p)): p for p in phrases if p and p.strip()}
        self.pattern = build_command_regex(self.phrases.values())

    def detect(self, text: Optional[str]) -> Optional[str]:
        """
        Detect a control phrase in a line.

        Args:
            text: Chat line

        Returns:
            The configured phrase that matched, or None
        """
        folded = collapse_whitespace(fold_text(text or ""))
        match = self.pattern.search(folded)
        if not match:
            return None
        return self.phrases.get(match.group(0).lower())

"""
Spam Engine — Lexical Evaluation

Runs the three detection layers over a complete string:
  1. Lexicon scan:  literal phrases, one hit per phrase
  2. Pattern scan:  structural regexes, one hit per match
  3. Heuristics:    ALL-CAPS runs, punctuation runs, link density

The engine only COLLECTS. It returns raw point totals, the keywords
in discovery order, and the character spans to highlight. Turning
that into a 0-100 score lives in scorer.py; turning spans into
markup lives in highlight.py.

The engine is instantiated once as a singleton. It holds no mutable
state, so concurrent evaluations are independent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from spamlens.rules import (
    CAPS_RUN,
    CAPS_RUN_POINTS,
    EXCESSIVE_PUNCTUATION,
    LINK_DENSITY_LIMIT,
    LINK_DENSITY_POINTS,
    PATTERN_POINTS_PER_MATCH,
    PUNCTUATION_RUN_POINTS,
    SPAM_KEYWORDS,
    SPAM_PATTERNS,
    URL_SHAPE,
    SpamPattern,
    keyword_weight,
)

logger = logging.getLogger(__name__)


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class RuleHit:
    """A lexicon phrase or pattern that fired during evaluation."""
    rule_id: str        # e.g. "KW_FREE_GIFT", "PHONE_NUMBER"
    category: str       # "keyword" | "pattern"
    matched_text: str   # Lexicon phrase, or the first pattern match
    count: int          # Occurrences found
    points: int


@dataclass
class Evaluation:
    """Raw, un-finalized output of a single engine pass."""
    text: str
    keywords: list[str] = field(default_factory=list)
    spans: list[tuple[int, int]] = field(default_factory=list)
    hits: list[RuleHit] = field(default_factory=list)
    lexicon_points: int = 0
    pattern_points: int = 0
    caps_points: int = 0
    punctuation_points: int = 0
    link_density_points: int = 0

    @property
    def raw_score(self) -> int:
        return (
            self.lexicon_points
            + self.pattern_points
            + self.caps_points
            + self.punctuation_points
            + self.link_density_points
        )


def _keyword_rule_id(phrase: str) -> str:
    return "KW_" + re.sub(r"[^A-Z0-9]+", "_", phrase.upper()).strip("_")


# ============================================================
# ENGINE
# ============================================================

class SpamEngine:
    """
    The lexical spam engine.

    Reads the module-level tables from rules.py and never writes to them.
    """

    def __init__(self):
        self._keywords = SPAM_KEYWORDS
        self._patterns = SPAM_PATTERNS
        # Phrase regexes are compiled once; the lexicon never changes
        self._keyword_regexes = tuple(
            re.compile(re.escape(k), re.IGNORECASE) for k in SPAM_KEYWORDS
        )

    def evaluate(self, text: str) -> Evaluation:
        """
        Evaluate text against the lexicon, the pattern set and the heuristics.

        Args:
            text: The full text to evaluate. Must be a non-empty str;
                degenerate input is handled by the caller.

        Returns:
            Evaluation with point totals, keywords, spans and hits.
        """
        evaluation = Evaluation(text=text)
        self._scan_lexicon(evaluation)
        self._scan_patterns(evaluation)
        self._scan_heuristics(evaluation)
        return evaluation

    def _scan_lexicon(self, evaluation: Evaluation) -> None:
        text = evaluation.text
        text_lower = text.lower()
        for phrase, regex in zip(self._keywords, self._keyword_regexes):
            if phrase.lower() not in text_lower:
                continue
            points = keyword_weight(phrase)
            occurrences = [m.span() for m in regex.finditer(text)]
            evaluation.lexicon_points += points
            evaluation.keywords.append(phrase)
            evaluation.spans.extend(occurrences)
            evaluation.hits.append(RuleHit(
                rule_id=_keyword_rule_id(phrase),
                category="keyword",
                matched_text=phrase,
                count=max(len(occurrences), 1),
                points=points,
            ))
            logger.debug("Spam keyword %r found (+%d)", phrase, points)

    def _scan_patterns(self, evaluation: Evaluation) -> None:
        for pattern in self._patterns:
            matches = self._match_pattern(evaluation.text, pattern)
            if not matches:
                continue
            points = PATTERN_POINTS_PER_MATCH * len(matches)
            evaluation.pattern_points += points
            for m in matches:
                matched = m.group(0)
                if matched not in evaluation.keywords:
                    evaluation.keywords.append(matched)
                evaluation.spans.append(m.span())
            evaluation.hits.append(RuleHit(
                rule_id=pattern.id,
                category="pattern",
                matched_text=matches[0].group(0),
                count=len(matches),
                points=points,
            ))
            logger.debug(
                "Spam pattern %s matched %r (+%d)",
                pattern.id, matches[0].group(0), points,
            )

    @staticmethod
    def _match_pattern(text: str, pattern: SpamPattern) -> list[re.Match]:
        """All non-overlapping, non-empty matches of a pattern."""
        return [m for m in pattern.regex.finditer(text) if m.end() > m.start()]

    def _scan_heuristics(self, evaluation: Evaluation) -> None:
        text = evaluation.text

        caps_runs = len(CAPS_RUN.findall(text))
        evaluation.caps_points = caps_runs * CAPS_RUN_POINTS

        punctuation_runs = len(EXCESSIVE_PUNCTUATION.findall(text))
        evaluation.punctuation_points = punctuation_runs * PUNCTUATION_RUN_POINTS

        if self.link_density(text) > LINK_DENSITY_LIMIT:
            evaluation.link_density_points = LINK_DENSITY_POINTS

        if caps_runs or punctuation_runs or evaluation.link_density_points:
            logger.debug(
                "Heuristics: %d caps run(s), %d punctuation run(s), link density +%d",
                caps_runs, punctuation_runs, evaluation.link_density_points,
            )

    @staticmethod
    def link_density(text: str) -> float:
        """URL-shaped substrings per 100 characters of text."""
        if not text:
            return 0.0
        urls = len(URL_SHAPE.findall(text))
        return urls / (len(text) / 100)


# ============================================================
# SINGLETON — instantiated once, never mutated
# ============================================================

spam_engine = SpamEngine()

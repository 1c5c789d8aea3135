"""
Spam Score Finalizer

Turns a raw engine Evaluation into the 0-100 spam score.
Separated from engine.py for single-responsibility.

Score = sum of engine points, then:
  - Floor at 30 when anything recognisable was found (OCR text tends
    to under-trigger the pattern rules, so a single hit still reads
    as suspicious)
  - Clamp to [0, 100]
"""

from __future__ import annotations

from spamlens.engine import Evaluation
from spamlens.rules import SCORE_FLOOR, SCORE_MAX, SPAM_THRESHOLD


def calculate_spam_score(evaluation: Evaluation) -> tuple[int, dict]:
    """
    Calculate the final spam score from an engine evaluation.

    Returns:
        (score, breakdown) where breakdown shows every contribution applied.
    """
    raw = evaluation.raw_score
    breakdown: dict = {
        "lexicon_points": evaluation.lexicon_points,
        "pattern_points": evaluation.pattern_points,
        "caps_points": evaluation.caps_points,
        "punctuation_points": evaluation.punctuation_points,
        "link_density_points": evaluation.link_density_points,
        "raw_score": raw,
        "floor_applied": False,
    }

    score = raw
    if evaluation.text and evaluation.keywords and score < SCORE_FLOOR:
        score = SCORE_FLOOR
        breakdown["floor_applied"] = True

    final = max(0, min(SCORE_MAX, score))
    breakdown["final_score"] = final
    return final, breakdown


def is_spam_score(score: int) -> bool:
    return score >= SPAM_THRESHOLD


def risk_label(score: int) -> str:
    """Display label for a score: clean, suspicious or spam."""
    if score < SCORE_FLOOR:
        return "clean"
    if score < SPAM_THRESHOLD:
        return "suspicious"
    return "spam"

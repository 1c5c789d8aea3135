"""
Spam Rules — Immutable Lexicon and Pattern Set

The static detection surface of SpamLens:
  1. The lexicon: literal spam phrases, weighted by length tier
  2. The pattern set: structural signals (phones, money, links, shouting)
  3. The heuristic regexes: text-shape signals that score but never highlight
  4. The scoring constants shared by the engine and the finalizer

Nothing here is mutated at runtime. The tables are tuples, the patterns
are compiled once at import, and every analysis reads them as-is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# --- Rules Version (stamped on the rule catalogue) ---
RULES_VERSION = "1.0.0"


# ============================================================
# SCORING CONSTANTS
# ============================================================

LONG_KEYWORD_POINTS = 10     # lexicon phrase longer than LONG_KEYWORD_LENGTH
SHORT_KEYWORD_POINTS = 5
LONG_KEYWORD_LENGTH = 5

PATTERN_POINTS_PER_MATCH = 5
CAPS_RUN_POINTS = 5
PUNCTUATION_RUN_POINTS = 3
LINK_DENSITY_POINTS = 15
LINK_DENSITY_LIMIT = 1.0     # URLs per 100 characters

SCORE_FLOOR = 30
SCORE_MAX = 100
SPAM_THRESHOLD = 70
MAX_KEYWORDS = 10


def keyword_weight(phrase: str) -> int:
    """Points a lexicon phrase contributes when it is found."""
    if len(phrase) > LONG_KEYWORD_LENGTH:
        return LONG_KEYWORD_POINTS
    return SHORT_KEYWORD_POINTS


# ============================================================
# LEXICON
# ============================================================

SPAM_KEYWORDS: tuple[str, ...] = (
    # Financial scams & free money
    "congratulations", "winner", "claim", "prize", "free money", "get rich",
    "make money", "earn cash", "work from home", "millionaire",
    "investment opportunity", "double your income", "no risk",

    # Urgency & fear
    "urgent", "act now", "limited time", "don't miss out", "final notice",
    "hurry", "only for today", "immediate response", "risk-free",
    "exclusive deal",

    # Phishing & fake alerts
    "account suspended", "verify", "update payment", "security alert",
    "unusual login", "confirm identity", "reset password", "account risk",
    "unauthorized access", "billing issue",

    # Free stuff & giveaways
    "free gift", "free trial", "free iphone", "100% free", "no cost",
    "complimentary", "special promotion", "bonus offer", "free access",
    "free membership",

    # Fake shopping & discounts
    "best price", "huge discount", "buy now", "lowest price", "discount code",
    "sale ends", "act fast", "limited stock", "today only",

    # Medical & health
    "miracle cure", "weight loss", "burn fat", "anti-aging",
    "erectile dysfunction", "hair loss", "instant results",
    "guaranteed success", "no doctor",

    # Blacklisted calls to action
    "click here", "open attachment", "exclusive offer", "no obligation",
    "special deal", "hidden charges", "get started now", "order now",

    # General
    "viagra", "cialis", "xanax", "rolex", "replica",
    "lottery", "nigerian", "inheritance", "bank transfer", "account number",
    "money back", "cost", "price", "casino", "bitcoin",
    "cash bonus", "credit", "password", "social security", "SSN",
    "bank account", "PayPal", "pharmacy", "cheap", "prescription",
    "medication", "enlargement", "diet",
)


# ============================================================
# PATTERN SET
# ============================================================

@dataclass(frozen=True)
class SpamPattern:
    """
    A structural spam signal.

    Every non-overlapping match scores PATTERN_POINTS_PER_MATCH, is
    highlighted, and (if not already present) joins the keyword list
    as the raw matched text.
    """
    id: str
    name: str
    regex: re.Pattern


def _p(pattern_id: str, name: str, source: str, flags: int = 0) -> SpamPattern:
    # ASCII semantics for \d, \w and \b
    return SpamPattern(id=pattern_id, name=name, regex=re.compile(source, flags | re.ASCII))


SPAM_PATTERNS: tuple[SpamPattern, ...] = (
    _p("PHONE_NUMBER", "Phone number", r"\d{3}-\d{3}-\d{4}"),
    _p("CURRENCY", "Currency amount", r"\$\d+(?:,\d{3})*(?:\.\d{2})?"),
    _p("EMAIL_ADDRESS", "Email address",
       r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    _p("URL", "Web link",
       r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
       r"(?:[-a-zA-Z0-9()@:%_+.~#?&/=]*)"),
    _p("FREE", "Free", r"\bfree\b", re.IGNORECASE),
    _p("GUARANTEE", "Guarantee", r"\bguarantee\b", re.IGNORECASE),
    _p("HUNDRED_PERCENT", "100% claim", r"\b100%"),
    _p("NO_OBLIGATION", "No obligation", r"\bno obligation\b", re.IGNORECASE),
    _p("INSTANT", "Instant", r"\binstant\b", re.IGNORECASE),
    _p("REPEATED_MARKS", "Repeated exclamation/question marks", r"[!?]{2,}"),
    _p("DOLLAR_SIGNS", "Dollar signs", r"\$\$\$"),
    _p("CASH_SHOUTED", "CASH in capitals", r"\bCASH\b"),
    _p("URGENT", "Urgent", r"\burgent\b", re.IGNORECASE),
    _p("ACT_NOW", "Act now", r"\bact now\b", re.IGNORECASE),
    _p("BUY_NOW", "Buy now", r"\bbuy now\b", re.IGNORECASE),
    _p("CLICK_HERE", "Click here", r"\bclick here\b", re.IGNORECASE),
    _p("ORDER_NOW", "Order now", r"\border now\b", re.IGNORECASE),
    _p("LIMITED_TIME", "Limited time", r"\blimited time\b", re.IGNORECASE),
    _p("SPECIAL_OFFER", "Special offer", r"\bspecial offer\b", re.IGNORECASE),
    _p("WINNER", "Winner", r"\bwinner\b", re.IGNORECASE),
)


# ============================================================
# HEURISTIC SIGNALS (score only — never highlighted)
# ============================================================

CAPS_RUN = re.compile(r"[A-Z]{5,}")
EXCESSIVE_PUNCTUATION = re.compile(r"[!?]{3,}")
URL_SHAPE = re.compile(r"https?://\S+")


def get_rules() -> dict:
    """
    Describe the full detection surface.

    Used by the GET /rules endpoint.
    """
    return {
        "rules_version": RULES_VERSION,
        "keywords": [
            {"phrase": k, "weight": keyword_weight(k)} for k in SPAM_KEYWORDS
        ],
        "patterns": [
            {
                "id": p.id,
                "name": p.name,
                "regex": p.regex.pattern,
                "case_sensitive": not (p.regex.flags & re.IGNORECASE),
                "points_per_match": PATTERN_POINTS_PER_MATCH,
            }
            for p in SPAM_PATTERNS
        ],
        "heuristics": {
            "caps_run": {"regex": CAPS_RUN.pattern, "points_per_run": CAPS_RUN_POINTS},
            "excessive_punctuation": {
                "regex": EXCESSIVE_PUNCTUATION.pattern,
                "points_per_run": PUNCTUATION_RUN_POINTS,
            },
            "link_density": {
                "regex": URL_SHAPE.pattern,
                "urls_per_100_chars": LINK_DENSITY_LIMIT,
                "points": LINK_DENSITY_POINTS,
            },
        },
        "score_floor": SCORE_FLOOR,
        "spam_threshold": SPAM_THRESHOLD,
        "max_keywords": MAX_KEYWORDS,
    }

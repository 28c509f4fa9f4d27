"""Bank SMS balance parser.

Pasted text may hold several bank messages glued together, in any mix of
Persian, Arabic and ASCII digits. The parser looks for a card suffix (last
four digits) and a balance on each line and returns the most recent balance
seen for every suffix.

The balance is taken to be the largest number on a line that mentions a
balance keyword. Messages that quote a purchase larger than the remaining
balance, or that mention two cards on one line, will be misattributed. This
is a known limitation of the heuristic; there is no confidence score.
"""

import logging
import re
from typing import Dict, List, Optional, Pattern

from components.jalali.adapter import to_ascii_digits

logger = logging.getLogger(__name__)

ZWNJ = "\u200c"
LINE_BREAKS = re.compile("\r?\n|\r|\u2028|\u2029")
THOUSANDS_RUN = re.compile("[,\u066c \t]+")
SEPARATORS = re.compile("[,\u066c]")

NUMBER_PATTERN = re.compile(r"\d{1,3}(?:,\d{3})+|\d+")
BALANCE_KEYWORDS = re.compile(r"موجودی|مانده|balance|available|avail", re.IGNORECASE)
LAST4_PATTERNS: List[Pattern[str]] = [
    # ****1234
    re.compile(r"\*{2,}\s*(\d{4})"),
    # 6037-****-****-1234 or 6037 9911 2233 1234
    re.compile(r"\d{4}[-\s]*(?:[\d*]{4}[-\s]*){2}(\d{4})"),
    # کارت 1234 / کارت شماره ***1234
    re.compile(r"کارت\s*(?:شماره)?\s*\*{0,4}\s*(\d{4})"),
]


def normalize_text(text: str) -> str:
    """
    Convert digits to ASCII, drop thousands separators and ZWNJ.

    A run of separators and whitespace that contains a comma (or the Arabic
    thousands sign) is removed entirely; plain whitespace is kept.
    """
    text = to_ascii_digits(text).replace(ZWNJ, "")
    return THOUSANDS_RUN.sub(
        lambda match: "" if SEPARATORS.search(match.group(0)) else match.group(0),
        text,
    )


def find_last4(text: str) -> Optional[str]:
    """Card suffix from the first pattern that matches, if any."""
    for pattern in LAST4_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def find_balance(text: str) -> Optional[int]:
    """Largest number in `text` when it mentions a balance keyword."""
    if not BALANCE_KEYWORDS.search(text):
        return None
    numbers = [int(token.replace(",", "")) for token in NUMBER_PATTERN.findall(text)]
    return max(numbers) if numbers else None


def parse_balances(raw_text: str) -> Dict[str, int]:
    """
    Extract card suffix -> balance pairs from pasted SMS text.

    Each line is examined on its own and later lines overwrite earlier ones
    for the same suffix. If no line yields a pair, the whole text is treated
    as a single message, which yields at most one pair. Never raises; text
    without recognizable content gives an empty mapping.
    """
    if not raw_text:
        return {}
    normalized = normalize_text(raw_text)

    balances: Dict[str, int] = {}
    for line in LINE_BREAKS.split(normalized):
        line = line.strip()
        if not line:
            continue
        last4 = find_last4(line)
        balance = find_balance(line)
        if last4 is not None and balance is not None:
            balances[last4] = balance

    if not balances:
        last4 = find_last4(normalized)
        balance = find_balance(normalized)
        if last4 is not None and balance is not None:
            balances[last4] = balance

    logger.debug("Parsed %s card balance(s) from %s characters of SMS text", len(balances), len(raw_text))
    return balances

"""
Command Grammar

Turns a speech transcript into a VoiceCommand using an explicit table of
rules. Each rule is (language, intent, pattern, extractor, priority);
rules for a language are tried in ascending priority, ties keep table
order. The first rule whose pattern matches and whose extractor returns
parameters wins. No winner means no command (None), which is normal.

English rules are full phrase patterns. Hindi and Marathi rules are
keyword tests: any keyword hit selects the rule, the first digit run
anywhere in the transcript is the amount, and the whole transcript is
kept as the description.
"""

import logging
import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from bizvoice.models.common import IntentKind, Language, TransactionType
from bizvoice.models.voice import VoiceCommand

logger = logging.getLogger(__name__)

Extractor = Callable[[Match[str], str], Optional[Dict[str, Any]]]


@dataclass(frozen=True)
class GrammarRule:
    """One entry of the command grammar."""
    language: Language
    intent: IntentKind
    pattern: Pattern[str]
    extractor: Extractor
    priority: int


# =========================================================================
# Extractors
# =========================================================================

_AMOUNT = r"(\d+(?:\.\d+)?)"
_CURRENCY = r"(?:rupees? |rs\.? |₹)?"
# \d also matches Devanagari digits (१२०); float() accepts them
_FIRST_DIGITS = re.compile(r"\d+")


def _phrase_transaction(tx_type: TransactionType) -> Extractor:
    """Amount from group 1, description from group 2."""
    def extract(match: Match[str], text: str) -> Dict[str, Any]:
        return {
            "type": tx_type.value,
            "amount": float(match.group(1)),
            "description": match.group(2).strip(),
        }
    return extract


def _keyword_transaction(tx_type: TransactionType) -> Extractor:
    """First digit run anywhere is the amount; no digits means no command."""
    def extract(match: Match[str], text: str) -> Optional[Dict[str, Any]]:
        digits = _FIRST_DIGITS.search(text)
        if not digits:
            return None
        return {
            "type": tx_type.value,
            "amount": float(digits.group(0)),
            "description": text,
        }
    return extract


def _normalize_period(period: str) -> str:
    # "today's" -> "today", "this week's" -> "this week"
    return re.sub(r"'?s$", "", period.lower().strip())


def _show_period_metric(match: Match[str], text: str) -> Dict[str, Any]:
    return {"period": _normalize_period(match.group(1)), "metric": match.group(2).lower()}


def _total_metric(match: Match[str], text: str) -> Dict[str, Any]:
    return {"period": "all", "metric": match.group(2).lower()}


def _verb_period(match: Match[str], text: str) -> Dict[str, Any]:
    return {"period": match.group(2).lower(), "metric": match.group(1).lower()}


def _stock_product(match: Match[str], text: str) -> Dict[str, Any]:
    return {"product": match.group(1).strip()}


def _no_parameters(match: Match[str], text: str) -> Dict[str, Any]:
    return {}


# =========================================================================
# Rule table
# =========================================================================

def _phrase(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE | re.DOTALL)


def _keywords(words: Iterable[str]) -> Pattern[str]:
    return re.compile("|".join(re.escape(w) for w in words), re.IGNORECASE)


def _english_rules() -> List[GrammarRule]:
    en = Language.ENGLISH
    add = IntentKind.ADD_TRANSACTION
    income = _phrase_transaction(TransactionType.INCOME)
    expense = _phrase_transaction(TransactionType.EXPENSE)

    return [
        GrammarRule(en, add, _phrase(rf"add income (?:of )?{_CURRENCY}{_AMOUNT}(?: for| from)? (.*)"), income, 10),
        GrammarRule(en, add, _phrase(rf"received {_CURRENCY}{_AMOUNT}(?: for| from)? (.*)"), income, 11),
        GrammarRule(en, add, _phrase(rf"sale (?:of )?{_CURRENCY}{_AMOUNT}(?: for)? (.*)"), income, 12),

        GrammarRule(en, add, _phrase(rf"add expense (?:of )?{_CURRENCY}{_AMOUNT}(?: for)? (.*)"), expense, 20),
        GrammarRule(en, add, _phrase(rf"spent {_CURRENCY}{_AMOUNT}(?: on)? (.*)"), expense, 21),
        GrammarRule(en, add, _phrase(rf"paid {_CURRENCY}{_AMOUNT}(?: for)? (.*)"), expense, 22),

        GrammarRule(
            en, IntentKind.QUERY_DATA,
            _phrase(r"show (today'?s?|this week'?s?|this month'?s?) (sales|revenue|expenses|profit)"),
            _show_period_metric, 30,
        ),
        GrammarRule(
            en, IntentKind.QUERY_DATA,
            _phrase(r"what is (my|the) (total revenue|total expense|profit)"),
            _total_metric, 31,
        ),
        GrammarRule(
            en, IntentKind.QUERY_DATA,
            _phrase(r"how much did i (earn|spend|make) (today|this week|this month)"),
            _verb_period, 32,
        ),

        GrammarRule(en, IntentKind.CHECK_STOCK, _phrase(r"check stock (?:for |of )?(.*)"), _stock_product, 40),
        GrammarRule(en, IntentKind.CHECK_STOCK, _phrase(r"how many (.*) (?:do i have|in stock)"), _stock_product, 41),
        GrammarRule(en, IntentKind.CHECK_STOCK, _phrase(r"stock level (?:of |for )?(.*)"), _stock_product, 42),

        GrammarRule(
            en, IntentKind.SHOW_ANALYTICS,
            _phrase(r"^(?=.*show)(?=.*(?:dashboard|analytics))"),
            _no_parameters, 50,
        ),
    ]


def _keyword_rules(
    language: Language,
    income_words: Iterable[str],
    expense_words: Iterable[str],
    show_words: Iterable[str],
) -> List[GrammarRule]:
    add = IntentKind.ADD_TRANSACTION
    return [
        GrammarRule(language, add, _keywords(income_words),
                    _keyword_transaction(TransactionType.INCOME), 10),
        GrammarRule(language, add, _keywords(expense_words),
                    _keyword_transaction(TransactionType.EXPENSE), 20),
        GrammarRule(language, IntentKind.SHOW_ANALYTICS, _keywords(show_words),
                    _no_parameters, 30),
    ]


GRAMMAR = tuple(
    _english_rules()
    + _keyword_rules(
        Language.HINDI,
        income_words=("आय", "बिक्री", "मिला"),
        expense_words=("खर्च", "दिया", "पेमेंट"),
        show_words=("दिखाओ", "बताओ"),
    )
    + _keyword_rules(
        Language.MARATHI,
        income_words=("उत्पन्न", "विक्री", "मिळाला"),
        expense_words=("खर्च", "दिला", "पेमेंट"),
        show_words=("दाखवा", "सांग"),
    )
)


def rules_for(language: Language) -> List[GrammarRule]:
    """Rules for a language in evaluation order."""
    return sorted(
        (rule for rule in GRAMMAR if rule.language == language),
        key=lambda rule: rule.priority,
    )


def parse_command(
    transcript: str,
    language: Union[Language, str] = Language.ENGLISH,
) -> Optional[VoiceCommand]:
    """
    Extract a command from a transcript.

    Returns:
        VoiceCommand, or None if nothing in the grammar matches
    """
    try:
        language = Language(language)
    except ValueError:
        logger.warning(f"Unsupported language for command parsing: {language!r}")
        return None

    if not transcript or not transcript.strip():
        return None

    for rule in rules_for(language):
        match = rule.pattern.search(transcript)
        if not match:
            continue

        parameters = rule.extractor(match, transcript)
        if parameters is None:
            continue

        return VoiceCommand(
            command=transcript,
            intent=rule.intent,
            parameters=parameters,
            language=language,
        )

    logger.debug(f"No command matched ({language.value}): {transcript!r}")
    return None

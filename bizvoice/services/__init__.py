"""bizvoice Services - Business Logic"""

from bizvoice.services.business_analytics import BusinessAnalyticsService
from bizvoice.services.command_executor import CommandExecutor, CommandResult
from bizvoice.services.command_grammar import GRAMMAR, GrammarRule, parse_command, rules_for
from bizvoice.services.departments import get_department_color, map_category_to_department
from bizvoice.services.voice_assistant import (
    LOCALES,
    SpeechRecognizer,
    SpeechSynthesizer,
    VoiceAssistant,
)

__all__ = [
    "BusinessAnalyticsService",
    "CommandExecutor",
    "CommandResult",
    "GRAMMAR",
    "GrammarRule",
    "parse_command",
    "rules_for",
    "map_category_to_department",
    "get_department_color",
    "LOCALES",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "VoiceAssistant",
]

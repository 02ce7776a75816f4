"""
Service wiring

Builds the ledger, analytics, voice and executor components from
settings. Host adapters pass their speech capabilities in.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from bizvoice.config import Settings, get_settings
from bizvoice.services.business_analytics import BusinessAnalyticsService
from bizvoice.services.command_executor import CommandExecutor
from bizvoice.services.voice_assistant import SpeechRecognizer, SpeechSynthesizer, VoiceAssistant
from bizvoice.storage.kv_store import JsonFileKeyValueStore, KeyValueStore
from bizvoice.storage.ledger_store import LedgerStore
from bizvoice.timeutil import Clock

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """The wired component set."""
    ledger: LedgerStore
    analytics: BusinessAnalyticsService
    voice: VoiceAssistant
    executor: CommandExecutor


def create_services(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Clock] = None,
    recognizer: Optional[SpeechRecognizer] = None,
    synthesizer: Optional[SpeechSynthesizer] = None,
) -> Services:
    """Create all components sharing one key-value store."""
    settings = settings or get_settings()
    store = store if store is not None else JsonFileKeyValueStore(settings.data_dir)

    ledger = LedgerStore(store=store, clock=clock)
    analytics = BusinessAnalyticsService(
        ledger,
        store=store,
        clock=clock,
        kpi_limit=settings.kpi_limit,
        top_products_limit=settings.top_products_limit,
        activity_limit=settings.activity_limit,
        recent_transaction_activities=settings.recent_transaction_activities,
    )
    voice = VoiceAssistant(
        recognizer=recognizer,
        synthesizer=synthesizer,
        default_language=settings.default_language,
    )
    executor = CommandExecutor(ledger, analytics, match_threshold=settings.product_match_threshold)

    logger.info(
        f"Started {settings.app_name} v{settings.app_version} "
        f"(speech input {'on' if voice.is_supported() else 'off'})"
    )
    return Services(ledger=ledger, analytics=analytics, voice=voice, executor=executor)

"""Voice command models."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from bizvoice.models.common import IntentKind, Language


class VoiceCommand(BaseModel):
    """
    Structured intent extracted from a transcript.

    Parameters depend on the intent:
    - add_transaction: type, amount, description
    - query_data: period, metric
    - check_stock: product
    - show_analytics: (none)
    """

    model_config = ConfigDict(frozen=True)

    command: str = Field(..., description="Original transcript")
    intent: IntentKind
    parameters: Dict[str, Any] = Field(default_factory=dict)
    language: Language = Language.ENGLISH

"""Intent resolution: turn free text or audio into a typed action proposal."""

from voice2action.intent.resolver import IntentResolver
from voice2action.intent.types import Category, Intent, IntentResult

__all__ = ["Category", "Intent", "IntentResolver", "IntentResult"]

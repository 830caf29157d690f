"""Pending confirmations: models, store and the button-press lifecycle."""

from voice2action.confirmations.lifecycle import (
    CallbackVerb,
    ConfirmationLifecycle,
    LifecycleOutcome,
    TransitionResult,
    callback_data,
    parse_callback_data,
)
from voice2action.confirmations.models import (
    ActionKind,
    CalendarPayload,
    EmailPayload,
    PendingAction,
    build_pending_action,
)
from voice2action.confirmations.store import ConfirmationStore

__all__ = [
    "ActionKind",
    "CalendarPayload",
    "CallbackVerb",
    "ConfirmationLifecycle",
    "ConfirmationStore",
    "EmailPayload",
    "LifecycleOutcome",
    "PendingAction",
    "TransitionResult",
    "build_pending_action",
    "callback_data",
    "parse_callback_data",
]

"""Google Workspace collaborators (Gmail, Calendar)."""

from voice2action.integrations.google.calendar import CalendarService
from voice2action.integrations.google.gmail import GmailService

__all__ = ["CalendarService", "GmailService"]

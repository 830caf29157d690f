"""Voice2Action - voice-driven assistant that turns commands into confirmable actions."""

__version__ = "0.1.0"
__logo__ = "🎙️"

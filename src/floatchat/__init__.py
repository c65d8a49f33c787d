"""FloatChat: conversational exploration of ARGO float profiles."""

__version__ = "1.0.0"

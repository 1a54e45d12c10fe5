"""Polypath: themed vocabulary flashcards generated by a chat-completion model."""

__version__ = "1.0.0"

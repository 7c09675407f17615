"""Helpers for testing commands: intents run a command through the real lifecycle."""

from cmdkit.testing.intents import CommandIntent, CommandIntents, IntentResult

__all__ = ["CommandIntent", "CommandIntents", "IntentResult"]

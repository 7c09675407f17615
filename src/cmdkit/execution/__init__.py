"""Execution layer — the command lifecycle and its telemetry spans."""

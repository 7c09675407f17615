"""Routing layer — token parsing, the merged command tree and key matching."""

"""Domain layer — command keys, entries, params and the error taxonomy.

INVARIANT: Pure data and pure functions. No filesystem or console access.
"""

"""Configuration layer — CLI config file, runtime settings and logging."""

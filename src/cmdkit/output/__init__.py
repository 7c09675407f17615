"""Output layer — rich console factory, theme and help/error renderers."""

"""Infrastructure layer — filesystem discovery and loading of command modules."""

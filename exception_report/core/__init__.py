"""Core utilities: configuration, logging and identifiers."""

"""Core types shared across oneio: errors, locations, codec registry, settings."""

"""Operating system adapters."""

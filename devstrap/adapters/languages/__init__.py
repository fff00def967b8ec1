"""Language ecosystem adapters."""

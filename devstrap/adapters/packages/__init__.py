"""Host package manager adapters."""

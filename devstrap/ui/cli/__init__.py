"""Command-line interface helpers — console reporter and prompts."""

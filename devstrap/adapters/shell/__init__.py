"""Shell-level adapters — command runner and Oh My Zsh."""

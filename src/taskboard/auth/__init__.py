"""Session management."""

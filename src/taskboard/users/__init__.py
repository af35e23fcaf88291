"""Users collection and password hashing."""

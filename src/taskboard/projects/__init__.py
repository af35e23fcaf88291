"""Projects collection (embedded tasks) and per-user views over it."""

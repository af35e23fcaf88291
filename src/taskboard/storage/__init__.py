"""Record store backends and the reserved storage keys."""

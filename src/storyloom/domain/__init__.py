"""Domain layer: plain data structures and pure lookups."""

"""Free-region bookkeeping, placement heuristics and packers."""

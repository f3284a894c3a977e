"""Single-player arcade snake with modes, unlocks and cosmetics."""

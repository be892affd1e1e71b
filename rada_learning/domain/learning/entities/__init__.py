"""Learning domain entities and aggregates."""

"""Pure domain services for the learning context."""

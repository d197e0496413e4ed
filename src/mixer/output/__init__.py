"""Output layer — console rendering for command results."""

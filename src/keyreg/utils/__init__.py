"""Small helpers shared across keyreg modules."""

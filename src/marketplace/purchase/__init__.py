"""Purchase request lifecycle: pending, accepted or rejected, paid."""

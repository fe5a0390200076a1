"""Infrastructure helpers for the marketplace domain."""

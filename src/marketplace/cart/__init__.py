"""Cart aggregation for a single farmer's listings."""

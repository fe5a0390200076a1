"""Building blocks shared by the marketplace sub-packages."""

"""Farm listings and their stock (the product store)."""

"""Farm marketplace: carts, purchase requests, the farm catalogue and user profiles."""

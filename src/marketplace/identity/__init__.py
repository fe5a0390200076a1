"""User profiles consulted for authorization."""

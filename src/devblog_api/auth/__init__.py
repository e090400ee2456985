"""Authentication for the public API."""

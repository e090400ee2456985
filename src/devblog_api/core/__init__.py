"""Core utilities shared across the DevBlog API."""

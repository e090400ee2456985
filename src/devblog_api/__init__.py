"""DevBlog API - read-only public API with API key gating."""

from ._version import __version__


__all__ = ["__version__"]

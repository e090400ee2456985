"""Route configuration for the API gate."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GatedRoutesConfig:
    """Paths that require an API key; everything else passes through."""

    exact_matches: frozenset[str] = field(
        default_factory=lambda: frozenset({"/api"})
    )

    prefixes: tuple[str, ...] = field(default_factory=lambda: ("/api/",))

    def is_gated(self, path: str) -> bool:
        """Check if a path requires authentication.

        Args:
            path: Request path to check

        Returns:
            True if the gate applies to the path, False otherwise

        """
        if path in self.exact_matches:
            return True

        return any(path.startswith(prefix) for prefix in self.prefixes)


DEFAULT_GATED_ROUTES = GatedRoutesConfig()

"""Per-request context stored on `request.state`."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RequestContext:
    """Request id plus metadata collected while the request is served."""

    request_id: str
    method: str = ""
    path: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, **kwargs: Any) -> None:
        """Merge keyword arguments into the metadata dict."""
        self.metadata.update(kwargs)

"""Retrieval of mesh resources as raw bytes."""

from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlparse

from meshops.core.config import RetrievalConfig
from meshops.core.exceptions import RetrievalError

# Any callable mapping a resource string to its bytes can stand in for
# ResourceRetriever.get
Retriever = Callable[[str], bytes]


class ResourceRetriever:
    """Fetches the bytes of local files and ``file://`` URIs."""

    SUPPORTED_SCHEMES = ("", "file")

    def __init__(self, config: Optional[RetrievalConfig] = None):
        """Initialize resource retriever.

        Args:
            config: Retrieval configuration
        """
        self.config = config or RetrievalConfig()

    @property
    def max_size(self) -> int:
        """Maximum resource size in bytes."""
        return int(self.config.max_size_mb * 1024 * 1024)

    def resolve(self, resource: str) -> Path:
        """Turn a path or ``file://`` URI into a filesystem path.

        Raises:
            RetrievalError: If the scheme is not supported
        """
        parsed = urlparse(resource)
        # Single letters are Windows drive names, not schemes
        if len(parsed.scheme) == 1:
            return Path(resource)
        if parsed.scheme not in self.SUPPORTED_SCHEMES:
            raise RetrievalError(resource, f"Unsupported scheme '{parsed.scheme}'")
        if parsed.scheme == "file":
            return Path(unquote(parsed.netloc + parsed.path))
        return Path(resource)

    def get(self, resource: str) -> bytes:
        """Read the full contents of a resource.

        An empty file yields ``b""``; deciding what that means is up to the
        caller.

        Raises:
            RetrievalError: If the resource cannot be read
        """
        path = self.resolve(resource)

        if not path.exists():
            raise RetrievalError(resource, "File does not exist")

        if not path.is_file():
            raise RetrievalError(resource, "Path is not a file")

        file_size = path.stat().st_size
        if file_size > self.max_size:
            raise RetrievalError(
                resource,
                f"File too large ({file_size / 1024 / 1024:.1f}MB > "
                f"{self.config.max_size_mb:g}MB limit)",
            )

        try:
            return path.read_bytes()
        except OSError as e:
            raise RetrievalError(resource, str(e))


def retrieve(resource: str, config: Optional[RetrievalConfig] = None) -> bytes:
    """Convenience function to fetch a resource's bytes."""
    return ResourceRetriever(config).get(resource)

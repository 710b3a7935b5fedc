"""Cache lookup result domain entity."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from starlette.responses import Response


class Provenance(str, Enum):
    """The tier that satisfied a read."""

    MEMORY = "MEMORY"
    STORE = "STORE"
    NOT_FOUND = "NOT-FOUND"
    ERROR = "ERROR"

    @property
    def cache_status(self) -> str:
        """Value reported in the X-Cache-Status header."""
        return {
            Provenance.MEMORY: "MEMORY-HIT",
            Provenance.STORE: "KV-MISS",
        }.get(self, self.value)


@dataclass(frozen=True)
class CachedResult:
    """Successful two-tier lookup.

    Attributes:
        data: The decoded value
        provenance: MEMORY or STORE
        response: Rendered 200 response carrying cache headers
    """

    data: Any
    provenance: Provenance
    response: Response

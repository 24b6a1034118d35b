"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta (enteros no negativos, pool >= 0) sin acoplar el Core
  a librerías de I/O.
- Los modelos describen *qué* decidió la detección de capacidades, no *cómo*
  se obtuvo.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ServerVersion(BaseModel):
    """Version reported by the server's `/version` resource."""

    model_config = ConfigDict(frozen=True)

    major: int = Field(..., ge=0)
    minor: int = Field(..., ge=0)
    patch: int = Field(..., ge=0)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class EndpointKind(str, Enum):
    """Which API surface serves user ACLs."""

    STANDARD = "standard"
    FALLBACK = "fallback"
    DISABLED = "disabled"


class EndpointChoice(BaseModel):
    """Result of endpoint selection.

    `base_url` is set for STANDARD and FALLBACK and is None for DISABLED.
    """

    model_config = ConfigDict(frozen=True)

    kind: EndpointKind
    base_url: str | None = None

    @classmethod
    def standard(cls, base_url: str) -> "EndpointChoice":
        return cls(kind=EndpointKind.STANDARD, base_url=base_url)

    @classmethod
    def fallback(cls, base_url: str) -> "EndpointChoice":
        return cls(kind=EndpointKind.FALLBACK, base_url=base_url)

    @classmethod
    def disabled(cls) -> "EndpointChoice":
        return cls(kind=EndpointKind.DISABLED)

    @property
    def is_disabled(self) -> bool:
        return self.kind is EndpointKind.DISABLED


class ConcurrencyLevel(BaseModel):
    """Requested thread count and the worker-pool size derived from it."""

    model_config = ConfigDict(frozen=True)

    threads: int = Field(..., ge=1, description="Maximum simultaneous requests.")
    pool_size: int = Field(..., ge=0, description="Parallel workers besides the main task.")


class ProbeResult(BaseModel):
    """Outcome of a reachability probe."""

    ok: bool
    detail: str = ""


class UserAclRecord(BaseModel):
    """A user's ACL document as stored in the backup tree."""

    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1, max_length=255)
    acl: dict[str, dict] = Field(
        default_factory=dict,
        description="Permission name -> {actors: [...], groups: [...]}. Content is not validated.",
    )

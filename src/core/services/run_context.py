"""Per-invocation state shared by the backup/restore pipeline.

`RunState` is built once per CLI invocation and passed explicitly to every
service. The endpoint selector is the only writer of `skip_useracl` after
construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from core.config import AppSettings
from core.domain.models import ConcurrencyLevel, EndpointChoice


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    warning: Callable[[str], None] | None = None
    progress: Callable[[int, int, str], None] | None = None


@dataclass
class RunState:
    settings: AppSettings
    concurrency: ConcurrencyLevel
    skip_useracl: bool = False
    endpoint: EndpointChoice | None = None
    warnings: list[str] = field(default_factory=list)
    hooks: PipelineHooks = field(default_factory=PipelineHooks)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.hooks.warning:
            self.hooks.warning(message)

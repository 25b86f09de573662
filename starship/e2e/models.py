"""
Data classes for the checks collected from a topology and their outcomes.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

PASSED = "passed"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass(frozen=True)
class Check:
    """A single request/assert cycle against one chain, relayer or balance."""

    name: str
    target: str
    run: Callable[[], Any]
    skip_reason: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.name}[{self.target}]"


@dataclass
class CheckResult:
    """Recorded outcome of a check."""

    check_id: str
    outcome: str
    detail: Optional[str] = None
    value: Any = None

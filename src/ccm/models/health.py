"""Link health models returned by diagnose and cure."""

from dataclasses import dataclass, field
from typing import Literal

from ccm.models.state import Selection

LinkIssue = Literal["broken_symlink", "missing_source"]
BrokenReason = Literal["link_missing", "not_a_symlink", "source_removed", "asset_missing"]

# Coarse issue reported for each precise reason
ISSUE_FOR_REASON: dict[BrokenReason, LinkIssue] = {
    "link_missing": "broken_symlink",
    "not_a_symlink": "broken_symlink",
    "source_removed": "missing_source",
    "asset_missing": "missing_source",
}


@dataclass(frozen=True)
class LinkHealth:
    """Health of one selection.

    Attributes:
        selection: The inspected selection
        healthy: True when the link exists, is a symlink and its source asset exists
        reason: Precise cause when broken, None when healthy
    """

    selection: Selection
    healthy: bool
    reason: BrokenReason | None = None

    @property
    def issue(self) -> LinkIssue | None:
        if self.reason is None:
            return None
        return ISSUE_FOR_REASON[self.reason]


@dataclass(frozen=True)
class Diagnosis:
    healthy: list[LinkHealth] = field(default_factory=list)
    broken: list[LinkHealth] = field(default_factory=list)


@dataclass(frozen=True)
class CureResult:
    """Outcome of cure: number of repaired selections and per-entry failures."""

    fixed: int
    errors: list[str] = field(default_factory=list)

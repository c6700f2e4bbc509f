"""Per-item outcomes for batch operations."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ItemOutcome:
    """Result of one item in a batch.

    Attributes:
        key: Item identifier (asset path or server name)
        ok: Whether the item succeeded
        error: Failure message when ok is False
    """

    key: str
    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class BatchResult:
    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ItemOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[ItemOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

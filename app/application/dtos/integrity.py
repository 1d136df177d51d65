"""Read-model of the room/worker assignment integrity report."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class IntegrityIssue:
    """One disagreement between a room's occupant list and worker records.

    kind is one of the IntegrityService.* issue constants.
    """

    kind: str
    site_id: str
    message: str
    room_id: str | None = None
    room_number: str | None = None
    worker_id: str | None = None
    national_id: str | None = None


@dataclass(frozen=True)
class IntegrityReport:
    rooms_checked: int
    workers_checked: int
    issues: list[IntegrityIssue] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.issues

"""Caller scope DTO (who is calling and which site they are limited to)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CallerScope:
    """Identity and site restriction of the caller.

    A caller without site_id administers every site (super admin).
    """

    user_id: str | None = None
    site_id: str | None = None

    @property
    def is_unscoped(self) -> bool:
        return self.site_id is None

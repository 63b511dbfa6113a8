"""Per-region alert status decoding against the canonical region order."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .models import Region


class AlertStatus(str, Enum):
    ACTIVE = "A"
    PARTLY_ACTIVE = "P"
    NO_ALERT = "N"
    LOADING = "L"

    @classmethod
    def from_char(cls, char: str) -> AlertStatus:
        """Decode one feed character; anything unknown means no information."""
        try:
            return cls(char)
        except ValueError:
            return cls.NO_ALERT

    @property
    def icon(self) -> str:
        return _STATUS_STYLE[self][0]

    @property
    def color(self) -> str:
        return _STATUS_STYLE[self][1]


_STATUS_STYLE: dict[AlertStatus, tuple[str, str]] = {
    AlertStatus.ACTIVE: ("🜸", "red"),
    AlertStatus.PARTLY_ACTIVE: ("🌤", "yellow"),
    AlertStatus.NO_ALERT: ("🌣", "blue"),
    AlertStatus.LOADING: ("↻", "white"),
}


@dataclass(frozen=True, slots=True)
class OblastStatus:
    region: Region
    status: AlertStatus

    @property
    def location_uid(self) -> int:
        return self.region.location_uid

    @property
    def is_active(self) -> bool:
        return self.status is AlertStatus.ACTIVE

    @property
    def is_partly_active(self) -> bool:
        return self.status is AlertStatus.PARTLY_ACTIVE

    def label(self, locale: str = "uk") -> str:
        return f"{self.status.icon} {self.region.name_by_locale(locale)}"


def decode_oblast_statuses(
    data: str,
    regions: Sequence[Region],
    *,
    oblast_level_only: bool = True,
) -> tuple[OblastStatus, ...]:
    """Join a one-character-per-region status string with ``regions`` by position.

    ``regions`` must be in the canonical collated order. With
    ``oblast_level_only`` a partial alert (P) counts as no alert for the
    region as a whole.
    """
    statuses = data.strip().strip('"')
    if len(statuses) != len(regions):
        raise ValueError(
            f"Status string has {len(statuses)} characters but there are {len(regions)} regions"
        )
    out: list[OblastStatus] = []
    for region, char in zip(regions, statuses):
        status = AlertStatus.from_char(char)
        if oblast_level_only and status is AlertStatus.PARTLY_ACTIVE:
            status = AlertStatus.NO_ALERT
        out.append(OblastStatus(region=region, status=status))
    return tuple(out)


def default_status_string(count: int) -> str:
    return AlertStatus.NO_ALERT.value * count

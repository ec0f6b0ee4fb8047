# models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from errors import NoEligibleDeviceError


@dataclass(frozen=True)
class Device:
    id: int
    name: str
    description: str

    def __str__(self) -> str:
        return f"{self.description} ({self.id}, {self.name})"


@dataclass(frozen=True)
class PatternSet:
    include_names: List[str] = field(default_factory=list)
    include_descriptions: List[str] = field(default_factory=list)
    exclude_names: List[str] = field(default_factory=list)
    exclude_descriptions: List[str] = field(default_factory=list)

    @property
    def has_includes(self) -> bool:
        return bool(self.include_names or self.include_descriptions)


@dataclass(frozen=True)
class Selection:
    """
    Outcome of one cycle step.

    `device` is None only when nothing passed the filters; `error` then holds
    the NoEligibleDeviceError for the caller to report.
    """

    eligible: List[Device]
    device: Optional[Device] = None
    current_position: Optional[int] = None  # index of the current default in `eligible`

    @property
    def ok(self) -> bool:
        return self.device is not None

    @property
    def device_id(self) -> Optional[int]:
        return self.device.id if self.device is not None else None

    @property
    def error(self) -> Optional[NoEligibleDeviceError]:
        if self.device is not None:
            return None
        return NoEligibleDeviceError("no matching devices found")

    def unwrap(self) -> Device:
        if self.device is None:
            raise NoEligibleDeviceError("no matching devices found")
        return self.device

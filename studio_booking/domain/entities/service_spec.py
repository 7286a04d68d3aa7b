from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceSpec:
    name: str
    duration_minutes: int
    pre_buffer_minutes: int = 0
    post_buffer_minutes: int = 0

    def __post_init__(self) -> None:
        if self.duration_minutes <= 0:
            raise ValueError(f"Service duration must be positive: {self.name}")
        if self.pre_buffer_minutes < 0 or self.post_buffer_minutes < 0:
            raise ValueError(f"Buffers cannot be negative: {self.name}")

    @property
    def reserved_minutes(self) -> int:
        return self.pre_buffer_minutes + self.duration_minutes + self.post_buffer_minutes

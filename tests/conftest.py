"""Deterministic stand-ins for the ephemeris-backed oracle."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

SYNODIC_DAYS = 29.530588
ANOMALISTIC_DAYS = 27.554550

# Close to the real lunations of early 2024.
REF_NEW_MOON = datetime(2024, 1, 11, 11, 57, tzinfo=timezone.utc)
REF_PERIGEE = datetime(2024, 1, 13, 10, 35, tzinfo=timezone.utc)


def days_between(a: datetime, b: datetime) -> float:
    return (a - b).total_seconds() / 86400.0


class SyntheticMoon:
    """Phase is a sawtooth over the synodic month, distance a cosine over
    the anomalistic month with its minimum at REF_PERIGEE."""

    def __init__(self, new_moon: datetime = REF_NEW_MOON, perigee: datetime = REF_PERIGEE):
        self.new_moon = new_moon
        self.perigee = perigee
        self.calls = 0

    def illumination(self, instant: datetime) -> float:
        self.calls += 1
        return (days_between(instant, self.new_moon) / SYNODIC_DAYS) % 1.0

    def distance_km(self, instant: datetime) -> float:
        angle = 2.0 * math.pi * days_between(instant, self.perigee) / ANOMALISTIC_DAYS
        return 384_400.0 - 21_000.0 * math.cos(angle)


class CosineIllumination:
    """Lit fraction peaking at 1.0 on full_moon."""

    def __init__(self, full_moon: datetime):
        self.full_moon = full_moon

    def illumination(self, instant: datetime) -> float:
        angle = 2.0 * math.pi * days_between(instant, self.full_moon) / SYNODIC_DAYS
        return 0.5 + 0.5 * math.cos(angle)

    def distance_km(self, instant: datetime) -> float:
        return 384_400.0


class VShapedDistance:
    """Distance grows linearly (in hours) away from a known perigee."""

    def __init__(self, perigee: datetime):
        self.perigee = perigee

    def illumination(self, instant: datetime) -> float:
        return 0.5

    def distance_km(self, instant: datetime) -> float:
        return 356_500.0 + 10.0 * abs((instant - self.perigee).total_seconds()) / 3600.0


class BrokenOracle:
    def __init__(self, illumination=None, distance=None, exc=None):
        self._illumination = illumination
        self._distance = distance
        self._exc = exc

    def illumination(self, instant):
        if self._exc is not None:
            raise self._exc
        return self._illumination

    def distance_km(self, instant):
        if self._exc is not None:
            raise self._exc
        return self._distance


@pytest.fixture
def moon() -> SyntheticMoon:
    return SyntheticMoon()


@pytest.fixture
def start() -> datetime:
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


class NotchedFullMoon:
    """Phase difference to Full Moon with two zeros at full_moon +/- gap_hours
    and a small bump between them; flat far from full_moon."""

    def __init__(self, full_moon: datetime, gap_hours: float, scale: float = 0.01):
        self.full_moon = full_moon
        self.gap_hours = gap_hours
        self.scale = scale

    def illumination(self, instant: datetime) -> float:
        hours = (instant - self.full_moon).total_seconds() / 3600.0
        return 0.5 + min(0.4, self.scale * abs(hours * hours - self.gap_hours * self.gap_hours))

    def distance_km(self, instant: datetime) -> float:
        return 384_400.0

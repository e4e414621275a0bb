"""
Berkland seismic windows: 3 days before to 4 days after each syzygy,
paired with the nearest lunar perigee. The window whose syzygy lies
closest to its perigee is the primary one.
"""
from collections import namedtuple
from datetime import timedelta

from calc_syzygies import find_lunations
from calc_perigee import estimate_perigee
from seismic_errors import NoSyzygyFound

DAYS_BEFORE = timedelta(days=3)
DAYS_AFTER = timedelta(days=4)
SECONDS_PER_DAY = 86400.0

SeismicWindow = namedtuple("SeismicWindow", [
    "syzygy",
    "window_start",
    "window_end",
    "perigee_instant",
    "perigee_distance_km",
    "perigee_delta_days"
])


class WindowSet(namedtuple("WindowSet", ["windows", "primary_index"])):
    """Chronological windows plus the index of the primary one."""

    __slots__ = ()

    @property
    def primary(self):
        if not self.windows:
            raise NoSyzygyFound("No syzygy found in the scan range; no seismic window available")
        return self.windows[self.primary_index]

    def is_primary(self, idx):
        return bool(self.windows) and idx == self.primary_index


def berkland_window(center):
    return center - DAYS_BEFORE, center + DAYS_AFTER


def build_window(oracle, syzygy):
    start, end = berkland_window(syzygy.instant)
    perigee = estimate_perigee(oracle, syzygy.instant)
    delta_days = abs((syzygy.instant - perigee.instant).total_seconds()) / SECONDS_PER_DAY
    return SeismicWindow(
        syzygy=syzygy,
        window_start=start,
        window_end=end,
        perigee_instant=perigee.instant,
        perigee_distance_km=perigee.distance_km,
        perigee_delta_days=delta_days
    )


def pick_primary(windows):
    """Index of the smallest perigee delta; the first one wins ties."""
    primary = 0
    for idx, w in enumerate(windows):
        if w.perigee_delta_days < windows[primary].perigee_delta_days:
            primary = idx
    return primary


def build_windows(oracle, syzygies, max_windows=2):
    """
    Builds windows for the first max_windows syzygies (chronological).
    Fewer syzygies give a shorter WindowSet; oracle failures propagate.
    """
    ordered = sorted(syzygies, key=lambda s: s.instant)[:max(max_windows, 0)]
    windows = tuple(build_window(oracle, s) for s in ordered)
    return WindowSet(windows, pick_primary(windows))


def compute_window_set(oracle, now, days_forward=60, per_type=2, max_windows=2):
    """Recomputes the whole WindowSet for the reference instant `now`."""
    lunations = find_lunations(oracle, now, days_forward, per_type)
    return build_windows(oracle, lunations, max_windows)

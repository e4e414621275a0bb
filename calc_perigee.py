from collections import namedtuple
from datetime import timedelta

from lunar_oracle import sample_distance

SPAN = timedelta(days=7)
STEP = timedelta(hours=2)

PerigeeEstimate = namedtuple("PerigeeEstimate", ["instant", "distance_km"])


def estimate_perigee(oracle, center):
    """
    Closest Earth-Moon distance sampled on a 2 hour grid spanning
    center +/- 7 days. The result is the best grid sample, so it is only
    as precise as the step; ties keep the center, then the earliest grid
    sample.
    """
    best = center
    best_dist = sample_distance(oracle, center)

    t = center - SPAN
    end = center + SPAN
    while t <= end:
        dist = sample_distance(oracle, t)
        if dist < best_dist:
            best = t
            best_dist = dist
        t += STEP

    return PerigeeEstimate(best, best_dist)

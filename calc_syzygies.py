from collections import namedtuple
from datetime import timedelta

from lunar_oracle import sample_phase

NEW_MOON = 0.0
FULL_MOON = 0.5

PHASE_NAMES = {
    NEW_MOON: "New Moon",
    FULL_MOON: "Full Moon"
}

SCAN_STEP = timedelta(hours=1)
DEDUP_GAP = timedelta(hours=6)

REFINE_HALF_WINDOW = timedelta(hours=12)
REFINE_ROUNDS = 10
REFINE_SAMPLES = 9

# type is "New Moon" or "Full Moon", instant a UTC datetime
Syzygy = namedtuple("Syzygy", ["type", "instant"])


def phase_diff(oracle, instant, target_phase):
    return abs(sample_phase(oracle, instant) - target_phase)


def refine_phase_time(oracle, seed, target_phase):
    """
    Local derivative-free search around a coarse seed.

    Each round samples REFINE_SAMPLES evenly spaced points across
    [best - window, best + window] and keeps the lowest phase difference,
    then halves the window. A round without improvement ends the search
    once the sample spacing is no coarser than the 1 hour scan step;
    coarser rounds continue with a halved window even without improvement.
    """
    best = seed
    best_diff = phase_diff(oracle, best, target_phase)
    window = REFINE_HALF_WINDOW
    half = REFINE_SAMPLES // 2

    for _ in range(REFINE_ROUNDS):
        center = best
        spacing = window / half
        improved = False
        for k in range(-half, half + 1):
            if k == 0:
                continue
            t = center + spacing * k
            diff = phase_diff(oracle, t, target_phase)
            if diff < best_diff:
                best = t
                best_diff = diff
                improved = True
        if not improved and spacing <= SCAN_STEP:
            break
        window = window / 2

    return best


def find_syzygies(oracle, start, days_forward, target_phase, max_results=3):
    """
    Scans forward in 1 hour steps for local minima of
    |illumination - target_phase| and refines each one. A rise only counts
    as a minimum after the difference has been falling.

    Returns at most max_results datetimes in chronological order.
    An empty list means nothing was found inside the scan range.
    """
    results = []
    if max_results <= 0:
        return results

    end = start + timedelta(days=days_forward)
    prev_t = start
    prev_diff = phase_diff(oracle, start, target_phase)
    falling = False
    t = start + SCAN_STEP

    while t <= end:
        diff = phase_diff(oracle, t, target_phase)
        if diff < prev_diff:
            falling = True
        elif diff > prev_diff and falling:
            falling = False
            refined = refine_phase_time(oracle, prev_t, target_phase)
            if not results or refined - results[-1] > DEDUP_GAP:
                results.append(refined)
                if len(results) >= max_results:
                    break
        prev_diff = diff
        prev_t = t
        t += SCAN_STEP

    return results


def find_lunations(oracle, now, days_forward=60, per_type=2):
    """
    Full and New Moons after `now`, merged into one chronological list
    of Syzygy records.
    """
    lunations = []
    for target in (FULL_MOON, NEW_MOON):
        for instant in find_syzygies(oracle, now, days_forward, target, per_type):
            lunations.append(Syzygy(PHASE_NAMES[target], instant))

    lunations.sort(key=lambda s: s.instant)
    return lunations

import json
import os
import numpy as np
from skyfield.api import load, Loader
from skyfield import almanac

from seismic_errors import OracleUnavailable

DEFAULT_EPHEMERIS = "de440s.bsp"

def load_config(path="config.json"):
    with open(path, "r") as f:
        return json.load(f)

def ensure_ephemeris(filename):
    loader = Loader('.')
    if not os.path.exists(filename):
        print(f"Downloading {filename}...")
    return loader(filename)


class SkyfieldOracle:
    """
    Moon phase and distance from a JPL ephemeris.

    illumination() follows the phase-cycle convention: 0 = New Moon,
    0.25 = First Quarter, 0.5 = Full Moon, 0.75 = Last Quarter.
    """

    def __init__(self, eph, ts):
        self.eph = eph
        self.ts = ts
        self.earth = eph['earth']
        self.moon = eph['moon']

    def illumination(self, instant):
        t = self.ts.from_datetime(instant)
        return almanac.moon_phase(self.eph, t).degrees / 360.0

    def distance_km(self, instant):
        t = self.ts.from_datetime(instant)
        return (self.earth - self.moon).at(t).distance().km


def load_oracle(config):
    eph = ensure_ephemeris(config.get("ephemeris_file", DEFAULT_EPHEMERIS))
    return SkyfieldOracle(eph, load.timescale())


def sample_phase(oracle, instant):
    """Illumination fraction at instant, or OracleUnavailable."""
    try:
        value = float(oracle.illumination(instant))
    except OracleUnavailable:
        raise
    except Exception as exc:
        raise OracleUnavailable(instant, "illumination", str(exc)) from exc
    if not np.isfinite(value) or not 0.0 <= value <= 1.0:
        raise OracleUnavailable(instant, "illumination", f"value out of range: {value!r}")
    return value


def sample_distance(oracle, instant):
    """Moon distance in km at instant, or OracleUnavailable."""
    try:
        value = float(oracle.distance_km(instant))
    except OracleUnavailable:
        raise
    except Exception as exc:
        raise OracleUnavailable(instant, "distance", str(exc)) from exc
    if not np.isfinite(value) or value <= 0.0:
        raise OracleUnavailable(instant, "distance", f"value out of range: {value!r}")
    return value

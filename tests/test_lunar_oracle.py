from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest

from lunar_oracle import DEFAULT_EPHEMERIS, load_config, sample_distance, sample_phase
from conftest import BrokenOracle, SyntheticMoon
from seismic_errors import OracleUnavailable

INSTANT = datetime(2024, 1, 25, 17, 54, tzinfo=timezone.utc)


def test_checked_samples_pass_through(moon: SyntheticMoon) -> None:
    assert 0.0 <= sample_phase(moon, INSTANT) < 1.0
    assert sample_distance(moon, INSTANT) > 300_000.0


def test_oracle_error_is_chained() -> None:
    with pytest.raises(OracleUnavailable) as info:
        sample_phase(BrokenOracle(exc=ValueError("date out of range")), INSTANT)
    assert info.value.instant == INSTANT
    assert "date out of range" in str(info.value)


def test_load_config(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"ephemeris_file": "de421.bsp"}')
    assert load_config(str(path)) == {"ephemeris_file": "de421.bsp"}


@pytest.mark.skipif(not os.path.exists(DEFAULT_EPHEMERIS), reason="ephemeris file not downloaded")
def test_skyfield_oracle_full_moon_2024_01_25() -> None:
    from skyfield.api import load

    from lunar_oracle import SkyfieldOracle, ensure_ephemeris

    oracle = SkyfieldOracle(ensure_ephemeris(DEFAULT_EPHEMERIS), load.timescale())
    assert sample_phase(oracle, INSTANT) == pytest.approx(0.5, abs=0.002)
    assert 350_000.0 < sample_distance(oracle, INSTANT) < 410_000.0

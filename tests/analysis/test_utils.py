import math

import numpy as np
import pytest

from analysis.config import TrackerConfig
from analysis.utils import loudness_db, rms, rms_to_db, safe_array


def test_safe_array_none_and_garbage():
    assert safe_array(None).size == 0
    assert safe_array("not audio").size == 0


def test_safe_array_flattens_and_keeps_length():
    arr = safe_array([[1, 2], [3, np.nan]])
    assert arr.shape == (4,)
    assert np.isnan(arr[3])


def test_rms_of_sine(tone):
    x = tone(100.0, sr=8000, n=8000, amplitude=1.0)
    assert rms(x) == pytest.approx(1 / math.sqrt(2), rel=1e-3)


def test_rms_empty_is_zero():
    assert rms([]) == 0.0


def test_rms_to_db():
    assert rms_to_db(1.0) == 0.0
    assert rms_to_db(0.1) == pytest.approx(-20.0)
    assert rms_to_db(0.0) == float("-inf")
    assert rms_to_db(-1.0) == float("-inf")
    assert rms_to_db(float("nan")) == float("-inf")


def test_loudness_db_silence_is_gated(config):
    db = loudness_db(np.zeros(1024))
    assert db == float("-inf")
    assert db < config.loudness_gate_db


# ---------------------------------------------------------
# TrackerConfig
# ---------------------------------------------------------

def test_config_defaults():
    cfg = TrackerConfig()
    assert cfg.min_hz == 50.0
    assert cfg.max_hz == 1000.0
    assert cfg.threshold == 0.15
    assert cfg.loudness_gate_db == -50.0
    assert cfg.min_confidence == 0.55
    assert cfg.analysis_rate_hz == 25.0
    assert cfg.smoothing_alpha == 0.18
    assert cfg.reference_pitch_hz == 440.0
    assert cfg.analysis_interval_ms == 40


def test_config_with_reference_pitch_returns_copy():
    cfg = TrackerConfig()
    alt = cfg.with_reference_pitch(442)
    assert alt.reference_pitch_hz == 442.0
    assert cfg.reference_pitch_hz == 440.0
    assert alt.min_hz == cfg.min_hz


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_hz": 0},
        {"max_hz": -1},
        {"min_hz": 500, "max_hz": 400},
        {"min_hz": 300, "max_hz": 300},
        {"threshold": 0},
        {"threshold": 1.5},
        {"smoothing_alpha": 0},
        {"min_confidence": 1.2},
        {"analysis_rate_hz": 0},
        {"reference_pitch_hz": float("inf")},
        {"loudness_gate_db": float("nan")},
    ],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        TrackerConfig(**kwargs)


def test_config_is_frozen():
    cfg = TrackerConfig()
    with pytest.raises(AttributeError):
        cfg.min_hz = 10.0

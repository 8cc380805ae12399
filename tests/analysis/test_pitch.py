import numpy as np
import pytest

from analysis.config import TrackerConfig
from analysis.pitch import estimate_pitch
from analysis.synthetic import silence, white_noise


@pytest.mark.parametrize(
    "f0, sr",
    [
        (55.0, 44100),
        (110.0, 44100),
        (261.63, 44100),
        (440.0, 48000),
        (659.25, 48000),
        (950.0, 44100),
        # r = 4f, integer periods
        (250.0, 1000),
        (500.0, 2000),
        (800.0, 3200),
    ],
)
def test_pure_sine_within_one_percent(tone, f0, sr):
    frame = tone(f0, sr=sr, n=4096)

    res = estimate_pitch(frame, sr)
    assert res.found
    assert res.frequency_hz == pytest.approx(f0, rel=0.01)
    assert res.confidence > 0.9
    assert res.method == "yin"


def test_sine_with_harmonics_tracks_fundamental(tone):
    sr = 44100
    frame = tone(196.0, sr=sr, n=4096, harmonics=(0.5, 0.3, 0.2))

    res = estimate_pitch(frame, sr)
    assert res.frequency_hz == pytest.approx(196.0, rel=0.01)
    assert res.confidence > 0.8


def test_amplitude_does_not_change_estimate(tone):
    sr = 44100
    loud = estimate_pitch(tone(330.0, sr=sr, amplitude=0.9), sr)
    quiet = estimate_pitch(tone(330.0, sr=sr, amplitude=0.001), sr)

    assert loud.frequency_hz == pytest.approx(quiet.frequency_hz, rel=1e-6)
    assert loud.confidence == pytest.approx(quiet.confidence, abs=1e-6)


def test_dc_offset_is_removed(tone):
    sr = 44100
    frame = tone(220.0, sr=sr) + 0.4
    res = estimate_pitch(frame, sr)
    assert res.frequency_hz == pytest.approx(220.0, rel=0.01)


def test_silence_is_absent():
    res = estimate_pitch(silence(4096), 44100)
    assert res.frequency_hz is None
    assert res.confidence == 0.0
    assert not res.found


def test_band_rejection_low_tone(tone):
    """20 Hz has a measurable period, but it lies below min_hz."""
    sr = 8000
    frame = tone(20.0, sr=sr, n=8192)

    res = estimate_pitch(frame, sr, TrackerConfig(min_hz=50, max_hz=1000))
    assert res.frequency_hz is None
    assert res.confidence == 0.0
    assert res.debug["reason"] == "out_of_range"


def test_band_rejection_just_above_max(tone):
    sr = 44100
    frame = tone(1050.0, sr=sr, n=4096)

    res = estimate_pitch(frame, sr)
    assert res.frequency_hz is None
    assert res.confidence == 0.0


def test_narrower_band_via_keywords(tone):
    sr = 44100
    frame = tone(440.0, sr=sr)

    assert estimate_pitch(frame, sr, min_hz=500).frequency_hz is None
    assert estimate_pitch(frame, sr, min_hz=300, max_hz=500).found


def test_white_noise_is_not_confident():
    res = estimate_pitch(white_noise(4096, seed=7), 44100)
    assert res.confidence < 0.5


def test_estimate_is_deterministic(tone):
    frame = tone(370.0, sr=44100) + 0.05 * white_noise(4096, seed=3)
    a = estimate_pitch(frame, 44100)
    b = estimate_pitch(frame, 44100)
    assert a == b


def test_input_frame_is_not_mutated(tone):
    frame = tone(220.0) + 0.2
    before = frame.copy()
    estimate_pitch(frame, 44100)
    np.testing.assert_array_equal(frame, before)


def test_accepts_plain_lists(tone):
    frame = tone(300.0, sr=44100).tolist()
    res = estimate_pitch(frame, 44100)
    assert res.frequency_hz == pytest.approx(300.0, rel=0.01)

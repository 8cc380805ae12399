# conftest.py
import pytest

from analysis.config import TrackerConfig
from analysis.pitch import PitchEstimate
from analysis.synthetic import synthetic_tone


@pytest.fixture
def config():
    return TrackerConfig()


@pytest.fixture
def tone():
    """tone(freq, sr=44100, n=4096, **kw) -> np.ndarray"""
    return synthetic_tone


@pytest.fixture
def make_estimate():
    def _make(freq, confidence=0.95):
        return PitchEstimate(freq, confidence)
    return _make

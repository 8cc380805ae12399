# analysis/config.py
from dataclasses import dataclass, replace
import math

# ---------------------------------------------------------
# Tuner defaults
# ---------------------------------------------------------
DEFAULT_MIN_HZ = 50.0
DEFAULT_MAX_HZ = 1000.0
DEFAULT_THRESHOLD = 0.15          # YIN stopping threshold
DEFAULT_LOUDNESS_GATE_DB = -50.0
DEFAULT_MIN_CONFIDENCE = 0.55
DEFAULT_ANALYSIS_RATE_HZ = 25.0   # analysis ticks per second
DEFAULT_SMOOTHING_ALPHA = 0.18
DEFAULT_REFERENCE_PITCH_HZ = 440.0


def _positive(name, value):
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")


@dataclass(frozen=True)
class TrackerConfig:
    """
    Options shared by the pitch estimator and the tracker.

    Invalid combinations are rejected here, once, so the per-frame
    code never has to raise.
    """

    min_hz: float = DEFAULT_MIN_HZ
    max_hz: float = DEFAULT_MAX_HZ
    threshold: float = DEFAULT_THRESHOLD
    loudness_gate_db: float = DEFAULT_LOUDNESS_GATE_DB
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    analysis_rate_hz: float = DEFAULT_ANALYSIS_RATE_HZ
    smoothing_alpha: float = DEFAULT_SMOOTHING_ALPHA
    reference_pitch_hz: float = DEFAULT_REFERENCE_PITCH_HZ

    def __post_init__(self):
        _positive("min_hz", self.min_hz)
        _positive("max_hz", self.max_hz)
        _positive("analysis_rate_hz", self.analysis_rate_hz)
        _positive("reference_pitch_hz", self.reference_pitch_hz)

        if self.min_hz >= self.max_hz:
            raise ValueError(
                f"min_hz ({self.min_hz}) must be below max_hz ({self.max_hz})"
            )
        if not (0.0 < self.threshold <= 1.0):
            raise ValueError(f"threshold must be in (0, 1], got {self.threshold!r}")
        if not (0.0 < self.smoothing_alpha <= 1.0):
            raise ValueError(
                f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha!r}"
            )
        if not (0.0 <= self.min_confidence <= 1.0):
            raise ValueError(
                f"min_confidence must be in [0, 1], got {self.min_confidence!r}"
            )
        # NaN would silently disable the loudness gate
        if math.isnan(self.loudness_gate_db):
            raise ValueError("loudness_gate_db must not be NaN")

    @property
    def analysis_interval_ms(self) -> int:
        return int(round(1000.0 / self.analysis_rate_hz))

    def with_reference_pitch(self, reference_pitch_hz: float) -> "TrackerConfig":
        return replace(self, reference_pitch_hz=float(reference_pitch_hz))

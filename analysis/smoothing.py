# analysis/smoothing.py
from dataclasses import dataclass
from typing import Optional
import logging
import math

from analysis.config import TrackerConfig
from analysis.pitch import PitchEstimate
from utils.music_utils import (
    hz_to_midi_float,
    midi_to_hz,
    midi_to_note_name,
    round_half_up,
)

logger = logging.getLogger(__name__)

# Bounds on the per-frame smoothing step
ALPHA_MIN = 0.05
ALPHA_MAX = 0.35


# ---------------------------------------------------------
# Tracker state + output
# ---------------------------------------------------------
@dataclass
class TrackerState:
    """Smoothed pitch in fractional semitones (MIDI scale), per session."""

    smoothed_pitch: Optional[float] = None

    def reset(self):
        self.smoothed_pitch = None


@dataclass(frozen=True)
class TrackedPitch:
    note_name: Optional[str]
    octave: Optional[int]
    cents: Optional[float]
    display_frequency_hz: Optional[float]
    confidence: float

    @property
    def has_pitch(self) -> bool:
        return self.note_name is not None

    @property
    def label(self) -> Optional[str]:
        if not self.has_pitch:
            return None
        return f"{self.note_name}{self.octave}"


NO_PITCH = TrackedPitch(None, None, None, None, 0.0)


def effective_alpha(base_alpha, confidence):
    """Confident frames move the estimate further, clamped to [0.05, 0.35]."""
    a = base_alpha * (0.6 + 0.4 * confidence)
    return min(ALPHA_MAX, max(ALPHA_MIN, a))


# ---------------------------------------------------------
# Tracker update
# ---------------------------------------------------------
def update_tracker(
    estimate: PitchEstimate,
    loudness_db: float,
    config: TrackerConfig,
    state: TrackerState,
) -> TrackedPitch:
    """
    Gate, smooth and name one estimate.

    Gated frames return NO_PITCH and leave `state` as it was, so the next
    valid frame continues from the previous smoothed value.
    """
    # NaN loudness compares False against the gate; treat it as silence
    silent = (
        loudness_db is None
        or math.isnan(loudness_db)
        or loudness_db < config.loudness_gate_db
    )

    if (
        silent
        or estimate is None
        or estimate.frequency_hz is None
        or estimate.confidence < config.min_confidence
    ):
        logger.debug(
            "gated: loudness=%s conf=%s",
            loudness_db,
            None if estimate is None else estimate.confidence,
        )
        return NO_PITCH

    confidence = float(estimate.confidence)
    raw_pitch = hz_to_midi_float(estimate.frequency_hz, config.reference_pitch_hz)

    if state.smoothed_pitch is None:
        logger.debug("cold start at %.3f", raw_pitch)
        state.smoothed_pitch = raw_pitch
    else:
        alpha = effective_alpha(config.smoothing_alpha, confidence)
        state.smoothed_pitch += (raw_pitch - state.smoothed_pitch) * alpha

    smoothed = state.smoothed_pitch
    rounded = round_half_up(smoothed)
    cents = (smoothed - rounded) * 100.0
    name, octave = midi_to_note_name(rounded)

    return TrackedPitch(
        note_name=name,
        octave=octave,
        cents=cents,
        display_frequency_hz=midi_to_hz(smoothed, config.reference_pitch_hz),
        confidence=confidence,
    )


class PitchTracker:
    """
    Session wrapper around update_tracker: owns one config and one state.
    """

    def __init__(self, config: Optional[TrackerConfig] = None,
                 state: Optional[TrackerState] = None):
        self.config = config if config is not None else TrackerConfig()
        self.state = state if state is not None else TrackerState()

    @property
    def current(self) -> Optional[float]:
        return self.state.smoothed_pitch

    def update(self, estimate: PitchEstimate, loudness_db: float) -> TrackedPitch:
        return update_tracker(estimate, loudness_db, self.config, self.state)

    def reset(self):
        """Explicit session stop; the only way smoothing state is dropped."""
        logger.debug("tracker reset")
        self.state.reset()

# tuner/live_analyzer.py
import logging
import time

from analysis.config import TrackerConfig
from analysis.pitch import estimate_pitch
from analysis.smoothing import PitchTracker
from analysis.utils import rms, rms_to_db, safe_array
from utils.music_utils import needle_position, normalize_reference_pitch, tuning_status

logger = logging.getLogger(__name__)


class LiveAnalyzer:
    """
    One analysis tick per call:
      - loudness (RMS -> dB) of the frame
      - single-frame pitch estimate
      - gated, smoothed tracker reading

    The caller owns the cadence (see analysis_interval_ms) and the audio
    source; this class only turns frames into readings.
    """

    def __init__(self, config=None, tracker=None, clock=time.time):
        if tracker is None:
            tracker = PitchTracker(config)
        elif config is not None:
            tracker.config = config
        self.tracker = tracker
        self.clock = clock

        self._latest_raw = None
        self._latest_processed = None

    @property
    def config(self) -> TrackerConfig:
        return self.tracker.config

    @property
    def analysis_interval_ms(self) -> int:
        return self.config.analysis_interval_ms

    def get_latest_raw(self):
        return self._latest_raw

    def get_latest_processed(self):
        return self._latest_processed

    def set_reference_pitch(self, value):
        a4 = normalize_reference_pitch(value)
        self.tracker.config = self.config.with_reference_pitch(a4)
        logger.info("Reference pitch set to A4=%.0f Hz", a4)
        return a4

    def process_frame(self, samples, sr):
        if sr is not None and sr < 0:
            raise ValueError(f"sample rate must not be negative, got {sr!r}")

        frame = safe_array(samples)
        level = rms(frame)
        db = rms_to_db(level)

        estimate = estimate_pitch(frame, sr, self.config)
        tracked = self.tracker.update(estimate, db)

        result = {
            "hz": tracked.display_frequency_hz,
            "note_name": tracked.note_name,
            "octave": tracked.octave,
            "cents": tracked.cents,
            "status": tuning_status(tracked.cents),
            "needle": needle_position(tracked.cents),
            "rms": level,
            "loudness_db": db,
            # raw estimator confidence, shown even when the tick is gated
            "confidence": estimate.confidence,
            "gated": not tracked.has_pitch,
            "a4": self.config.reference_pitch_hz,
            "ts": self.clock(),
        }

        self._latest_raw = estimate
        self._latest_processed = result
        return result

    def reset(self):
        """Session stop: drop smoothing state and the last reading."""
        self.tracker.reset()
        self._latest_raw = None
        self._latest_processed = None

# analysis/pitch.py
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import logging
import math

import numpy as np

from analysis.config import TrackerConfig

logger = logging.getLogger(__name__)

MIN_FRAME_LENGTH = 512
_EPS = 1e-12
_SILENCE_FLOOR = 1e-9


@dataclass(frozen=True)
class PitchEstimate:
    frequency_hz: Optional[float]
    confidence: float
    method: str = "yin"
    debug: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.frequency_hz is not None


def _absent(reason, **extra) -> PitchEstimate:
    logger.debug("no pitch: %s %s", reason, extra or "")
    debug = {"reason": reason}
    debug.update(extra)
    return PitchEstimate(None, 0.0, method="none", debug=debug)


# ---------------------------------------------------------
# YIN building blocks
# ---------------------------------------------------------
def difference_function(x: np.ndarray, tau_max: int) -> np.ndarray:
    """
    Squared-difference function d[0..tau_max] over the first half of x.

    Every lag from 1 upwards is filled so the cumulative mean below is
    taken over real values; d[0] is 0 by definition.
    """
    half = x.size // 2
    head = x[:half]
    d = np.zeros(tau_max + 1, dtype=float)
    for tau in range(1, tau_max + 1):
        diff = head - x[tau:tau + half]
        d[tau] = np.dot(diff, diff)
    return d


def cumulative_mean_normalized(d: np.ndarray) -> np.ndarray:
    """cmnd[tau] = d[tau] * tau / sum(d[1..tau]), with cmnd[0] = 1."""
    cmnd = np.ones_like(d)
    if d.size > 1:
        taus = np.arange(1, d.size, dtype=float)
        running = np.cumsum(d[1:])
        cmnd[1:] = d[1:] * taus / (running + _EPS)
    return cmnd


def pick_lag(cmnd: np.ndarray, tau_min: int, tau_max: int, threshold: float):
    """
    First dip under threshold, walked down to its local minimum.
    Falls back to the global minimum over [tau_min, tau_max].

    Returns (tau, used_fallback).
    """
    below = np.nonzero(cmnd[tau_min:tau_max + 1] < threshold)[0]
    if below.size:
        tau = int(below[0]) + tau_min
        while tau + 1 <= tau_max and cmnd[tau + 1] < cmnd[tau]:
            tau += 1
        return tau, False

    tau = int(np.argmin(cmnd[tau_min:tau_max + 1])) + tau_min
    return tau, True


def parabolic_interpolation(arr: np.ndarray, i: int, lo: int = 0,
                            hi: Optional[int] = None) -> float:
    """
    Vertex of the parabola through (i-1, i, i+1).

    Returns i unchanged when a neighbour falls outside [lo, hi] or the
    curvature is numerically flat.
    """
    if hi is None:
        hi = arr.size - 1
    if i - 1 < lo or i + 1 > hi:
        return float(i)

    y0, y1, y2 = arr[i - 1], arr[i], arr[i + 1]
    denom = y0 - 2 * y1 + y2
    if abs(denom) < _EPS:
        return float(i)
    return i + 0.5 * (y0 - y2) / denom


# ---------------------------------------------------------
# Public estimator
# ---------------------------------------------------------
def estimate_pitch(frame, sr, config: Optional[TrackerConfig] = None, *,
                   min_hz=None, max_hz=None, threshold=None) -> PitchEstimate:
    """
    Single-frame YIN-style f0 estimate.

    Keyword overrides win over `config`. Short frames, a bad sample rate,
    silence and out-of-band results all come back as an absent estimate
    with confidence 0; nothing here raises for those.
    """
    cfg = config if config is not None else TrackerConfig()
    min_hz = cfg.min_hz if min_hz is None else float(min_hz)
    max_hz = cfg.max_hz if max_hz is None else float(max_hz)
    threshold = cfg.threshold if threshold is None else float(threshold)

    if frame is None:
        return _absent("short frame", length=0)

    x = np.asarray(frame, dtype=float).flatten()
    n = x.size
    if n < MIN_FRAME_LENGTH:
        return _absent("short frame", length=n)

    if sr is None or not math.isfinite(sr) or sr <= 0:
        return _absent("invalid sample rate", sr=sr)

    if not np.all(np.isfinite(x)):
        return _absent("non-finite samples")

    x = x - np.mean(x)
    if not np.any(np.abs(x) > _SILENCE_FLOOR):
        return _absent("degenerate")

    # Lag window. The last bound keeps x[tau + i] inside the frame for
    # every i in the first half.
    tau_min = max(2, int(math.floor(sr / max_hz)))
    tau_max = min(int(math.floor(sr / min_hz)), n - 2, n - n // 2)
    if tau_min > tau_max:
        return _absent("lag window invalid", tau_min=tau_min, tau_max=tau_max)

    # One lag past the window, when it fits, to tell a real minimum at
    # tau_max from a curve still falling toward a lower frequency.
    tau_hi = tau_max + 1 if tau_max + 1 <= n - n // 2 else tau_max

    d = difference_function(x, tau_hi)
    cmnd = cumulative_mean_normalized(d)

    tau, fallback = pick_lag(cmnd, tau_min, tau_max, threshold)

    # A minimum pinned to the window edge belongs to a period outside it.
    # Without the extra lag (frame too short), a fallback pick at tau_max
    # cannot be told apart from that, so it is rejected too.
    if tau == tau_max:
        if tau_hi > tau_max:
            pinned = cmnd[tau_hi] < cmnd[tau]
        else:
            pinned = fallback
    elif tau == tau_min:
        pinned = cmnd[tau - 1] < cmnd[tau]
    else:
        pinned = False
    if pinned:
        return _absent("out_of_range", tau=tau, edge=True)

    # Refine on d rather than cmnd: the tau weighting in cmnd skews the
    # parabola toward shorter lags.
    refined = parabolic_interpolation(d, tau, lo=1, hi=tau_max)

    if refined <= 0:
        return _absent("degenerate", tau=tau)

    f0 = sr / refined
    if not math.isfinite(f0) or not (min_hz <= f0 <= max_hz):
        return _absent("out_of_range", f0=f0, tau=tau)

    confidence = float(np.clip(1.0 - cmnd[tau], 0.0, 1.0))

    return PitchEstimate(
        frequency_hz=float(f0),
        confidence=confidence,
        method="yin",
        debug={"tau": tau, "refined_tau": float(refined), "fallback": fallback},
    )

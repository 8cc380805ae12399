# analysis.utils
import numpy as np


def safe_array(x):
    """
    Convert x into a 1D float64 numpy array.
    Returns a zero-length array if x is None or not numeric.

    Non-finite samples are kept: dropping them would shift the period.
    """
    if x is None:
        return np.zeros(0, dtype=float)

    try:
        return np.asarray(x, dtype=float).flatten()
    except (TypeError, ValueError):
        return np.zeros(0, dtype=float)


def rms(samples):
    """Root-mean-square level; 0.0 for an empty frame."""
    arr = safe_array(samples)
    if arr.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(arr * arr)))


def rms_to_db(value):
    """20*log10(rms); -inf for rms <= 0, which every loudness gate rejects."""
    if value is None or not value > 0:
        return float("-inf")
    return float(20.0 * np.log10(value))


def loudness_db(samples):
    return rms_to_db(rms(samples))

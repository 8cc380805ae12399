import numpy as np


def synthetic_tone(freq, sr=44100, n=4096, amplitude=0.5, harmonics=None,
                   phase=0.0):
    """
    Generate a test tone of exactly n samples.

    Parameters
    ----------
    freq : float
        Fundamental frequency in Hz.
    sr : int
        Sample rate.
    n : int
        Number of samples.
    amplitude : float
        Peak amplitude of the fundamental.
    harmonics : sequence of float, optional
        Relative amplitudes of partials 2, 3, ... added on top.
    phase : float
        Starting phase in radians.

    Returns
    -------
    np.ndarray
        The synthetic audio signal.
    """
    t = np.arange(n, dtype=float) / sr
    sig = amplitude * np.sin(2 * np.pi * freq * t + phase)
    for k, rel in enumerate(harmonics or (), start=2):
        sig += amplitude * rel * np.sin(2 * np.pi * k * freq * t + k * phase)
    return sig


def silence(n=4096):
    return np.zeros(n, dtype=float)


def white_noise(n=4096, amplitude=0.5, seed=0):
    rng = np.random.default_rng(seed)
    return amplitude * rng.uniform(-1.0, 1.0, n)

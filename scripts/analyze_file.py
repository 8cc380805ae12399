import argparse
import logging

import numpy as np
import soundfile as sf

from analysis.config import TrackerConfig
from tuner.live_analyzer import LiveAnalyzer

logger = logging.getLogger(__name__)

DEFAULT_FRAME_SIZE = 8192


def to_mono(y):
    y = np.asarray(y, dtype=float)
    if y.ndim > 1:
        y = y.mean(axis=1)
    return y


def iter_frames(y, sr, frame_size=DEFAULT_FRAME_SIZE, rate_hz=25.0):
    """Trailing frame_size window at each analysis tick, like a live analyser buffer."""
    hop = max(1, int(round(sr / rate_hz)))
    end = frame_size
    while end <= len(y):
        yield end / sr, y[end - frame_size:end]
        end += hop


def analyze_file(path, a4=440.0, frame_size=DEFAULT_FRAME_SIZE, rate_hz=25.0):
    y, sr = sf.read(path)
    y = to_mono(y)

    analyzer = LiveAnalyzer(TrackerConfig(analysis_rate_hz=rate_hz))
    analyzer.set_reference_pitch(a4)

    rows = []
    for t, frame in iter_frames(y, sr, frame_size, rate_hz):
        reading = analyzer.process_frame(frame, sr)
        reading["t"] = t
        rows.append(reading)
    return rows


def format_reading(r):
    if r["gated"]:
        return f"{r['t']:7.2f}s  --      {r['loudness_db']:6.1f} dB"
    return (
        f"{r['t']:7.2f}s  {r['note_name']}{r['octave']:<4} "
        f"{r['hz']:8.2f} Hz  {r['cents']:+5.1f}c  conf={r['confidence']:.2f}"
    )


def main(argv=None):
    p = argparse.ArgumentParser(description="Offline tuner readings for an audio file")
    p.add_argument("path")
    p.add_argument("--a4", type=float, default=440.0, help="reference pitch, 440 or 442")
    p.add_argument("--frame-size", type=int, default=DEFAULT_FRAME_SIZE)
    p.add_argument("--rate", type=float, default=25.0, help="analysis ticks per second")
    p.add_argument("--debug", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
    )

    rows = analyze_file(args.path, a4=args.a4, frame_size=args.frame_size,
                        rate_hz=args.rate)
    for r in rows:
        print(format_reading(r))

    pitched = sum(1 for r in rows if not r["gated"])
    logger.info("Analyzed %d ticks: %d with pitch", len(rows), pitched)
    return 0 if pitched else 2


if __name__ == "__main__":
    raise SystemExit(main())

import math

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

A4_MIDI = 69
SUPPORTED_REFERENCE_PITCHES = (440.0, 442.0)
IN_TUNE_CENTS = 5.0
NEEDLE_RANGE_CENTS = 50.0

# -------------------------
# Pitch <-> MIDI
# -------------------------


def round_half_up(x):
    """Nearest integer, ties toward +inf (Python's round() ties to even)."""
    return int(math.floor(x + 0.5))


def hz_to_midi_float(f0, a4=440.0):
    """Continuous MIDI pitch (fractional semitones) for a frequency."""
    if f0 is None or f0 <= 0:
        return None
    return A4_MIDI + 12 * math.log2(f0 / a4)


def midi_to_hz(midi, a4=440.0):
    return a4 * 2.0 ** ((midi - A4_MIDI) / 12.0)


def midi_to_note_name(midi):
    """
    (pitch class, octave) for an integer MIDI index.

    Negative indices are valid: -1 is B-2, -12 is C-2.
    """
    midi = int(midi)
    return NOTE_NAMES[midi % 12], midi // 12 - 1


# -------------------------
# Tuning reference + display helpers
# -------------------------


def normalize_reference_pitch(value):
    """The tuner offers A4 = 440 or 442; anything else falls back to 440."""
    default = SUPPORTED_REFERENCE_PITCHES[0]
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if v in SUPPORTED_REFERENCE_PITCHES else default


def tuning_status(cents, tolerance=IN_TUNE_CENTS):
    if cents is None:
        return None
    if abs(cents) <= tolerance:
        return "in_tune"
    return "flat" if cents < 0 else "sharp"


def needle_position(cents):
    """Cents clamped to +/-50 and scaled to [-1, 1]; 0 when there is no pitch."""
    if cents is None:
        return 0.0
    c = max(-NEEDLE_RANGE_CENTS, min(NEEDLE_RANGE_CENTS, cents))
    return c / NEEDLE_RANGE_CENTS

"""
cadence.analyze.audio - Windowed energy and pitch extraction.

Splits a mono PCM signal into fixed, non-overlapping windows and computes
RMS energy (dB) and pYIN fundamental-frequency statistics for each one
using numpy and librosa. Windows are independent of each other and of the
word timeline.
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, NamedTuple

import numpy as np

from cadence.analyze.cancellation import CancelToken, raise_if_cancelled
from cadence.logging import logger
from cadence.models import EnergyWindow, PitchWindow

SILENCE_FLOOR_DB = -96.0
PITCH_REFERENCE_HZ = 55.0
PITCH_MIN_HZ = 50.0
PITCH_MAX_HZ = 600.0
PITCH_HOP_SECONDS = 0.01


class AudioClip(NamedTuple):
    """Decoded PCM samples and their sample rate."""

    samples: Any
    sample_rate: int


class AudioFeatures(NamedTuple):
    energy_windows: tuple[EnergyWindow, ...]
    pitch_windows: tuple[PitchWindow, ...]


def to_mono(samples: Any) -> np.ndarray:
    """Convert PCM input to a 1-D float32 array in [-1, 1].

    Integer PCM is scaled by its type's range. Two-dimensional input is
    averaged over its channel axis (the shorter one).
    """
    audio = np.asarray(samples)
    if np.issubdtype(audio.dtype, np.integer):
        audio = audio.astype(np.float32) / np.iinfo(audio.dtype).max
    audio = audio.astype(np.float32, copy=False)

    if audio.ndim > 1:
        if audio.shape[0] > audio.shape[1]:
            audio = audio.T
        audio = audio.mean(axis=0)
    return np.ascontiguousarray(audio.reshape(-1))


def hz_to_semitones(hz: np.ndarray | float, reference_hz: float = PITCH_REFERENCE_HZ):
    """Semitones above the reference frequency (55 Hz is A1)."""
    return 12 * np.log2(np.asarray(hz, dtype=np.float64) / reference_hz)


def window_rms_db(window: np.ndarray, floor_db: float = SILENCE_FLOOR_DB) -> float:
    """RMS level in dB, never below floor_db."""
    if len(window) == 0:
        return floor_db
    rms = float(np.sqrt(np.mean(window.astype(np.float64) ** 2)))
    if rms <= 0:
        return floor_db
    return max(20 * math.log10(rms), floor_db)


def pitch_frame_length(sample_rate: int, fmin_hz: float) -> int:
    """Smallest power-of-two frame (>= 2048) long enough to see fmin_hz.

    pYIN needs the half-frame autocorrelation lag to cover one full period
    of the lowest pitch.
    """
    needed = 2 * sample_rate / fmin_hz + 4
    length = 2048
    while length < needed:
        length *= 2
    return length


def track_pitch(
    window: np.ndarray,
    sample_rate: int,
    fmin_hz: float = PITCH_MIN_HZ,
    fmax_hz: float = PITCH_MAX_HZ,
    hop_seconds: float = PITCH_HOP_SECONDS,
) -> tuple[np.ndarray, int]:
    """Voiced f0 values of one window and its total sub-frame count.

    Returns:
        Tuple of (voiced_f0_hz, frame_count)
    """
    hop_length = max(1, int(sample_rate * hop_seconds))
    frame_count = 1 + len(window) // hop_length

    if len(window) == 0 or not np.any(window):
        return np.array([], dtype=np.float64), frame_count

    import librosa

    fmax_hz = min(fmax_hz, sample_rate / 2)
    f0, voiced_flag, _ = librosa.pyin(
        window,
        fmin=fmin_hz,
        fmax=fmax_hz,
        sr=sample_rate,
        frame_length=pitch_frame_length(sample_rate, fmin_hz),
        hop_length=hop_length,
        center=True,
    )

    keep = voiced_flag & np.isfinite(f0)
    voiced = f0[keep]
    voiced = voiced[(voiced >= fmin_hz) & (voiced <= fmax_hz)]
    return voiced.astype(np.float64), len(f0)


def summarize_pitch(
    voiced_hz: np.ndarray,
    frame_count: int,
    start_time: float,
    end_time: float,
    reference_hz: float = PITCH_REFERENCE_HZ,
) -> PitchWindow:
    """Collapse one window's voiced frames into a PitchWindow."""
    if len(voiced_hz) == 0 or frame_count == 0:
        return PitchWindow(start_time=start_time, end_time=end_time)

    semitones = hz_to_semitones(voiced_hz, reference_hz)
    return PitchWindow(
        start_time=start_time,
        end_time=end_time,
        median_f0_hz=float(np.median(voiced_hz)),
        median_f0_semitones=float(np.median(semitones)),
        f0_range_semitones=float(np.percentile(semitones, 90) - np.percentile(semitones, 10)),
        f0_stddev_semitones=float(np.std(semitones)),
        voiced_frame_ratio=len(voiced_hz) / frame_count,
    )


def extract_audio_features(
    samples: Any,
    sample_rate: int,
    window_seconds: float = 1.0,
    reference_hz: float = PITCH_REFERENCE_HZ,
    fmin_hz: float = PITCH_MIN_HZ,
    fmax_hz: float = PITCH_MAX_HZ,
    hop_seconds: float = PITCH_HOP_SECONDS,
    silence_floor_db: float = SILENCE_FLOOR_DB,
    max_workers: int = 1,
    cancel: CancelToken | None = None,
) -> AudioFeatures:
    """Compute energy and pitch windows over a PCM signal.

    Args:
        samples: PCM samples (mono, or multi-channel to be downmixed)
        sample_rate: Samples per second
        window_seconds: Window length; the final window may be shorter
        reference_hz: Semitone reference frequency
        fmin_hz: Lowest f0 the tracker searches
        fmax_hz: Highest f0 the tracker searches
        hop_seconds: Pitch sub-frame hop
        silence_floor_db: dB value used for zero-amplitude windows
        max_workers: Windows estimated concurrently; 1 runs sequentially
        cancel: Optional cancellation token, checked before each window

    Returns:
        AudioFeatures of (energy_windows, pitch_windows), one of each per window

    Raises:
        ValueError: If sample_rate or window_seconds is not positive
        AnalysisCancelledError: If the token is set mid-pass
    """
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    if window_seconds <= 0:
        raise ValueError(f"window_seconds must be positive, got {window_seconds}")

    audio = to_mono(samples)
    total_samples = len(audio)
    if total_samples == 0:
        return AudioFeatures((), ())

    samples_per_window = max(1, int(round(window_seconds * sample_rate)))
    starts = list(range(0, total_samples, samples_per_window))

    def analyze_window(offset: int) -> tuple[EnergyWindow, PitchWindow]:
        raise_if_cancelled(cancel, "audio feature extraction")
        window = audio[offset : offset + samples_per_window]
        start_time = offset / sample_rate
        end_time = (offset + len(window)) / sample_rate

        energy = EnergyWindow(
            start_time=start_time,
            end_time=end_time,
            rms_db=window_rms_db(window, silence_floor_db),
        )
        voiced, frame_count = track_pitch(window, sample_rate, fmin_hz, fmax_hz, hop_seconds)
        pitch = summarize_pitch(voiced, frame_count, start_time, end_time, reference_hz)
        return energy, pitch

    logger.debug(
        "Extracting audio features: %d samples @ %d Hz, %d window(s), %d worker(s)",
        total_samples,
        sample_rate,
        len(starts),
        max_workers,
    )

    if max_workers <= 1 or len(starts) == 1:
        results = [analyze_window(offset) for offset in starts]
    else:
        executor = ThreadPoolExecutor(max_workers=max_workers)
        try:
            results = list(executor.map(analyze_window, starts))
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    return AudioFeatures(
        energy_windows=tuple(energy for energy, _ in results),
        pitch_windows=tuple(pitch for _, pitch in results),
    )

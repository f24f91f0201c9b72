"""
cadence.extract.audio - Audio decoding with librosa.

Decodes any format librosa can read (via soundfile or audioread/FFmpeg)
into mono float32 PCM at the analysis sample rate.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from cadence.analyze.audio import AudioClip
from cadence.exceptions import AudioDecodeError
from cadence.logging import logger

ANALYSIS_SAMPLE_RATE = 16000


def decode_audio(path: Path, sample_rate: int = ANALYSIS_SAMPLE_RATE) -> AudioClip:
    """Decode an audio or video file to mono PCM.

    Args:
        path: Path to the media file
        sample_rate: Target sample rate; the signal is resampled to it

    Returns:
        AudioClip with float32 samples

    Raises:
        AudioDecodeError: If the file is missing or cannot be decoded
    """
    import librosa

    if not path.exists():
        raise AudioDecodeError(f"Audio file not found: {path}")

    logger.debug("Decoding audio: %s @ %d Hz", path.name, sample_rate)
    try:
        samples, sr = librosa.load(str(path), sr=sample_rate, mono=True)
    except Exception as e:
        raise AudioDecodeError(f"Failed to decode audio {path.name}: {e}") from e

    return AudioClip(samples=samples, sample_rate=int(sr))


def audio_decoder(path: Path, sample_rate: int = ANALYSIS_SAMPLE_RATE) -> Callable[[], AudioClip]:
    """Deferred decoder for the engine's audio branch."""

    def decode() -> AudioClip:
        return decode_audio(path, sample_rate)

    return decode

"""
cadence.extract - Audio decoding.

Turns audio files into the mono PCM samples the audio feature extractor
consumes.
"""

from __future__ import annotations

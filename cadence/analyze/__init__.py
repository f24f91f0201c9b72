"""
cadence.analyze - Delivery analysis.

Text analyzers over the word timeline (pace, fillers, pauses, content
segments), windowed audio features (energy, pitch), and the engine that
joins them into one report.
"""

from __future__ import annotations

"""
cadence.reports - Human-readable renderings of a delivery report.
"""

from __future__ import annotations

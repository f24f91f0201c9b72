"""
Cadence - delivery analytics for recorded presentations.

Turns a timestamped transcript (and optionally the talk's audio) into a
report of how the talk was delivered: pace, filler words, pauses, pacing
by content section, vocal energy and pitch dynamics.
"""

__version__ = "0.1.0"

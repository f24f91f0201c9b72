"""
cadence.reports.summary - Plain-text delivery digest.

Condenses a DeliveryAnalytics report into a few lines of prose-like text,
suitable for a terminal or as context for a coaching prompt.
"""

from __future__ import annotations

from cadence.models import DeliveryAnalytics


def format_timestamp(seconds: float) -> str:
    """Format seconds as M:SS, minutes unbounded."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def describe_pace(wpm: float) -> str:
    if wpm < 100:
        return "very slow"
    if wpm < 120:
        return "measured, deliberate"
    if wpm < 150:
        return "conversational, good range"
    if wpm < 170:
        return "brisk but clear"
    if wpm < 190:
        return "fast"
    return "very fast, may lose audience"


def describe_pace_variation(stddev: float) -> str:
    if stddev < 8:
        return "very uniform, could benefit from more variation"
    if stddev < 20:
        return "natural variation"
    if stddev < 35:
        return "notable variation, may indicate rushing or hesitation"
    return "high variation, inconsistent pacing"


def describe_pitch_variation(stddev_semitones: float) -> str:
    if stddev_semitones < 1.0:
        return "monotone"
    if stddev_semitones < 2.5:
        return "some expression"
    return "expressive"


def _pace_lines(analytics: DeliveryAnalytics) -> list[str]:
    lines = [
        f"Speaking pace: {analytics.average_wpm:.0f} WPM average "
        f"({describe_pace(analytics.average_wpm)})",
        f"Pace variation: {analytics.pace_variation:.1f} WPM std dev "
        f"({describe_pace_variation(analytics.pace_variation)})",
    ]
    windows = analytics.pace_windows
    if len(windows) > 1:
        fastest = max(windows, key=lambda w: w.wpm)
        slowest = min(windows, key=lambda w: w.wpm)
        lines.append(f"Fastest section: {fastest.wpm:.0f} WPM at {format_timestamp(fastest.start_time)}")
        lines.append(f"Slowest section: {slowest.wpm:.0f} WPM at {format_timestamp(slowest.start_time)}")
    return lines


def _filler_lines(analytics: DeliveryAnalytics) -> list[str]:
    lines = [
        f"Filler words: {analytics.total_filler_count} total "
        f"({analytics.fillers_per_minute:.1f}/min)"
    ]
    if analytics.filler_summary:
        top = ", ".join(f'"{f.phrase}" ({f.count}x)' for f in analytics.filler_summary[:3])
        lines.append(f"Most frequent: {top}")
    return lines


def _pause_lines(analytics: DeliveryAnalytics, pause_threshold: float | None) -> list[str]:
    label = "Significant pauses"
    if pause_threshold is not None:
        label += f" (>{pause_threshold:g}s)"
    lines = [f"{label}: {analytics.total_pause_count}"]
    if analytics.longest_pause is not None:
        pause = analytics.longest_pause
        lines.append(
            f'Longest pause: {pause.duration:.1f}s after "{pause.preceding_context}" '
            f"at {format_timestamp(pause.start)}"
        )
    return lines


def _segment_lines(analytics: DeliveryAnalytics) -> list[str]:
    if len(analytics.content_segments) < 2:
        return []
    lines = ["Pace by content section:"]
    for seg in analytics.content_segments:
        lines.append(
            f"  {format_timestamp(seg.start_time)}-{format_timestamp(seg.end_time)}: "
            f'{seg.wpm:.0f} WPM, "{seg.topic_label}"'
        )
    return lines


def _voice_lines(analytics: DeliveryAnalytics) -> list[str]:
    if not analytics.audio_analyzed:
        return []
    lines = [
        f"Vocal energy: {analytics.average_energy_db:.1f} dB average, "
        f"peak {analytics.peak_energy_db:.1f} dB, "
        f"variation {analytics.energy_variation:.1f} dB"
    ]
    if analytics.average_pitch_hz > 0:
        lines.append(
            f"Pitch: {analytics.average_pitch_hz:.0f} Hz median, "
            f"range {analytics.pitch_range_semitones:.1f} semitones, "
            f"variation {analytics.pitch_variation_semitones:.1f} semitones "
            f"({describe_pitch_variation(analytics.pitch_variation_semitones)})"
        )
    else:
        lines.append("Pitch: no voiced speech detected")
    lines.append(f"Voiced frames: {analytics.overall_voiced_ratio:.0%}")
    return lines


def format_analytics_summary(
    analytics: DeliveryAnalytics,
    pause_threshold: float | None = None,
) -> str:
    """Render a delivery report as a short text digest.

    Args:
        analytics: Report to summarize
        pause_threshold: Pause threshold used for the run, shown in the
            pause heading when given

    Returns:
        Multi-line summary; "No delivery data available." for empty reports
    """
    if analytics.total_duration_seconds <= 0 or not analytics.words:
        return "No delivery data available."

    sections = [
        _pace_lines(analytics),
        _filler_lines(analytics),
        _pause_lines(analytics, pause_threshold),
        _segment_lines(analytics),
        _voice_lines(analytics),
    ]
    blocks = ["\n".join(section) for section in sections if section]
    return "\n\n".join(blocks)

"""
cadence.analyze.engine - Delivery analytics aggregator.

Runs the text analyzers over the word timeline and the audio extractor over
the PCM signal as two independent branches, joins them, and rolls their
outputs up into one immutable DeliveryAnalytics report.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Union

from cadence.analyze.audio import AudioClip, AudioFeatures, extract_audio_features
from cadence.analyze.cancellation import CancelToken, raise_if_cancelled
from cadence.analyze.fillers import FillerLexicon, detect_fillers
from cadence.analyze.pace import analyze_pace
from cadence.analyze.pauses import detect_pauses
from cadence.analyze.segments import TopicLabeler, segment_content
from cadence.config import AudioSettings, CadenceConfig
from cadence.exceptions import AnalysisCancelledError, AudioDecodeError
from cadence.logging import logger
from cadence.models import DeliveryAnalytics, EnergyWindow, PitchWindow, TimedWord
from cadence.timeline import WordLike, build_timeline, timeline_duration
from cadence.utils import mean, population_stddev

AudioDecoder = Callable[[], AudioClip]
AudioSource = Union[AudioClip, AudioDecoder]


def energy_rollup(windows: Sequence[EnergyWindow]) -> dict[str, float]:
    """Average, spread and peak of window energy; zeros without windows."""
    levels = [w.rms_db for w in windows]
    return {
        "average_energy_db": mean(levels),
        "energy_variation": population_stddev(levels),
        "peak_energy_db": max(levels) if levels else 0.0,
    }


def pitch_rollup(windows: Sequence[PitchWindow]) -> dict[str, float]:
    """Pitch aggregates over voiced windows; voiced ratio over all windows."""
    voiced = [w for w in windows if w.voiced]
    semitones = [w.median_f0_semitones for w in voiced]
    return {
        "average_pitch_hz": mean([w.median_f0_hz for w in voiced]),
        "average_pitch_semitones": mean(semitones),
        "pitch_range_semitones": max(semitones) - min(semitones) if semitones else 0.0,
        "pitch_variation_semitones": population_stddev(semitones),
        "overall_voiced_ratio": mean([w.voiced_frame_ratio for w in windows]),
    }


def _analyze_text(
    words: tuple[TimedWord, ...],
    config: CadenceConfig,
    labeler: TopicLabeler | None,
    cancel: CancelToken | None,
) -> dict[str, Any]:
    raise_if_cancelled(cancel, "pace analysis")
    pace = analyze_pace(words, config.pace.window_seconds, config.pace.step_seconds)

    raise_if_cancelled(cancel, "filler detection")
    fillers = detect_fillers(
        words,
        FillerLexicon(config.fillers.lexicon),
        config.fillers.max_phrase_gap_seconds,
    )

    raise_if_cancelled(cancel, "pause detection")
    pauses = detect_pauses(
        words,
        config.pauses.min_duration_seconds,
        config.pauses.context_words,
    )

    segments = segment_content(
        words,
        labeler=labeler,
        target_segment_seconds=config.segments.target_segment_seconds,
        cancel=cancel,
    )

    return {
        "average_wpm": pace.average_wpm,
        "pace_windows": pace.windows,
        "pace_variation": pace.pace_variation,
        "filler_instances": fillers.instances,
        "filler_summary": fillers.summary,
        "total_filler_count": fillers.total_count,
        "fillers_per_minute": fillers.per_minute,
        "pauses": pauses.pauses,
        "total_pause_count": pauses.total_count,
        "average_pause_duration": pauses.average_duration,
        "longest_pause": pauses.longest_pause,
        "content_segments": segments,
    }


def _analyze_audio(
    audio: AudioSource,
    settings: AudioSettings,
    cancel: CancelToken | None,
) -> AudioFeatures | None:
    """Audio branch; None when the clip cannot be decoded or analyzed."""
    if isinstance(audio, AudioClip):
        clip = audio
    else:
        try:
            clip = audio()
        except AnalysisCancelledError:
            raise
        except AudioDecodeError as e:
            logger.warning("Audio decoding failed, continuing without audio: %s", e)
            return None
        except Exception as e:
            logger.warning(
                "Audio decoder raised %s, continuing without audio: %s", type(e).__name__, e
            )
            return None

    try:
        return extract_audio_features(
            clip.samples,
            clip.sample_rate,
            window_seconds=settings.window_seconds,
            reference_hz=settings.pitch_reference_hz,
            fmin_hz=settings.pitch_min_hz,
            fmax_hz=settings.pitch_max_hz,
            hop_seconds=settings.pitch_hop_seconds,
            silence_floor_db=settings.silence_floor_db,
            max_workers=settings.max_workers,
            cancel=cancel,
        )
    except ValueError as e:
        logger.warning("Audio clip unusable, continuing without audio: %s", e)
        return None


def analyze_delivery(
    words: Iterable[WordLike],
    audio: AudioSource | None = None,
    labeler: TopicLabeler | None = None,
    config: CadenceConfig | None = None,
    cancel: CancelToken | None = None,
    analyzed_at: str | None = None,
) -> DeliveryAnalytics:
    """Build the full delivery report for one talk.

    The text branch (pace, fillers, pauses, segments) and the audio branch
    run concurrently and are joined before the report is assembled.

    Args:
        words: Transcriber output, TimedWord values or word/start/end mappings
        audio: AudioClip, or a zero-argument decoder returning one; None
            (or audio disabled in config) skips energy and pitch
        labeler: Topic labeler for content segments; defaults to the
            opening-words heuristic
        config: Analysis configuration; defaults to CadenceConfig()
        cancel: Optional token; when set the run aborts with
            AnalysisCancelledError and nothing is returned
        analyzed_at: Timestamp recorded on the report; None leaves the
            report free of run-specific data

    Returns:
        Immutable DeliveryAnalytics report

    Raises:
        TimelineError: If word timestamps are out of order
        AnalysisCancelledError: If cancelled mid-run
    """
    if config is None:
        config = CadenceConfig()

    timeline = build_timeline(words)
    total_duration = timeline_duration(timeline)
    use_audio = audio is not None and config.audio.enabled

    logger.debug(
        "Analyzing %d words over %.1fs (audio: %s)",
        len(timeline),
        total_duration,
        "yes" if use_audio else "no",
    )

    with ThreadPoolExecutor(max_workers=2) as executor:
        text_future = executor.submit(_analyze_text, timeline, config, labeler, cancel)
        audio_future = (
            executor.submit(_analyze_audio, audio, config.audio, cancel) if use_audio else None
        )
        text_results = text_future.result()
        audio_features = audio_future.result() if audio_future is not None else None

    raise_if_cancelled(cancel, "report assembly")

    if audio_features is None:
        audio_features = AudioFeatures((), ())

    return DeliveryAnalytics(
        words=timeline,
        total_duration_seconds=total_duration,
        **text_results,
        audio_analyzed=audio_future is not None and bool(audio_features.energy_windows),
        energy_windows=audio_features.energy_windows,
        **energy_rollup(audio_features.energy_windows),
        pitch_windows=audio_features.pitch_windows,
        **pitch_rollup(audio_features.pitch_windows),
        analyzed_at=analyzed_at,
    )

# mq_resynth/core/pipeline.py

from __future__ import annotations
from typing import Optional, Sequence

import numpy as np
import structlog

from mq_resynth.analysis.peaks import detect_peaks
from mq_resynth.analysis.tracking import track_partials, track_summary
from mq_resynth.config import settings
from mq_resynth.preprocessing.stft import magnitude_frames
from mq_resynth.synthesis.additive import synthesize
from mq_resynth.types.dataclasses import ResynthesisResult

logger = structlog.get_logger()


def resynthesize(
    spectrogram: Sequence[Sequence[float]] | np.ndarray,
    sample_rate: float,
    frame_len: int,
    threshold: Optional[float] = None,
    max_peaks: Optional[int] = None,
    matching_radius: Optional[float] = None,
) -> ResynthesisResult:
    """
    Pipeline complet :
      1) détection des pics par frame,
      2) suivi des partiels,
      3) synthèse additive.
    Les paramètres non fournis viennent de `settings` (variables MQ_RESYNTH_*).
    """
    threshold = settings.threshold if threshold is None else threshold
    max_peaks = settings.max_peaks if max_peaks is None else max_peaks
    matching_radius = settings.matching_radius if matching_radius is None else matching_radius

    frames = detect_peaks(spectrogram, sample_rate, threshold, max_peaks)
    tracks = track_partials(frames, matching_radius=matching_radius)
    audio = synthesize(tracks, frame_len, sample_rate)

    logger.info("pipeline.resynthesized", samples=int(audio.size), **track_summary(tracks))
    return ResynthesisResult(
        frames=frames,
        tracks=tracks,
        audio=audio,
        sample_rate=float(sample_rate),
        frame_len=int(frame_len),
    )


def resynthesize_signal(
    signal: np.ndarray,
    sr: int,
    n_fft: Optional[int] = None,
    hop_length: Optional[int] = None,
    **kwargs,
) -> ResynthesisResult:
    """Raccourci depuis un signal mono : STFT librosa puis resynthesize(frame_len=hop_length)."""
    n_fft = settings.n_fft if n_fft is None else n_fft
    hop_length = settings.hop_length if hop_length is None else hop_length

    spectrogram = magnitude_frames(signal, n_fft=n_fft, hop_length=hop_length)
    return resynthesize(spectrogram, sr, hop_length, **kwargs)

# mq_resynth/analysis/peaks.py

from __future__ import annotations
from typing import List, Optional, Sequence

import numpy as np
import structlog

from mq_resynth.types.dataclasses import Peak
from mq_resynth.types.schemas import PeakDetectionParams

logger = structlog.get_logger()


def cap_highest_frequencies(peaks: List[Peak], max_peaks: Optional[int]) -> List[Peak]:
    """
    Garde les `max_peaks` pics de plus HAUTE fréquence (pas d'amplitude).
    `peaks` doit être trié par fréquence croissante.
    """
    if max_peaks is None:
        return peaks
    return peaks[max(len(peaks) - max_peaks, 0):]


def _frame_peaks(frame: np.ndarray, sample_rate: float, threshold: float) -> List[Peak]:
    bins = frame.size
    bin_factor = sample_rate / (bins * 2)

    prev_mag = frame[:-2]
    cur_mag = frame[1:-1]
    next_mag = frame[2:]
    mask = (cur_mag > prev_mag) & (cur_mag > next_mag) & (cur_mag > threshold)

    # indices croissants -> fréquences croissantes
    idx = np.flatnonzero(mask) + 1
    return [Peak(freq=float(i * bin_factor), amp=float(frame[i])) for i in idx]


def detect_peaks(
    spectrogram: Sequence[Sequence[float]] | np.ndarray,
    sample_rate: float,
    threshold: float,
    max_peaks: Optional[int] = None,
) -> List[List[Peak]]:
    """
    Détection naïve des pics d'un spectrogramme d'amplitude.

    Args:
        spectrogram: 1er axe = temps (frames), 2e axe = bins de fréquence (magnitudes).
        sample_rate: fréquence d'échantillonnage (Hz), pour convertir bin -> Hz.
        threshold: amplitude minimale d'un pic (strictement dépassée).
        max_peaks: (optionnel) ne garde que les N pics de plus haute fréquence.

    Returns:
        Une liste de frames, chacune une liste de Peak triée par fréquence croissante.

    Un bin i (hors premier et dernier) est un pic s'il dépasse strictement ses deux
    voisins et le seuil. Pas d'interpolation : freq = i * sample_rate / (2 * bins).
    """
    params = PeakDetectionParams(sample_rate=sample_rate, threshold=threshold, max_peaks=max_peaks)

    frames = [np.asarray(frame, dtype=float) for frame in spectrogram]
    for idx, frame in enumerate(frames):
        if frame.ndim != 1 or frame.size < 3:
            raise ValueError(
                f"Frame {idx} must be a 1-D magnitude vector of at least 3 bins (shape {frame.shape})"
            )

    all_peaks: List[List[Peak]] = []
    for frame in frames:
        frame_peaks = _frame_peaks(frame, params.sample_rate, params.threshold)
        all_peaks.append(cap_highest_frequencies(frame_peaks, params.max_peaks))

    logger.debug(
        "peaks.detected",
        frames=len(all_peaks),
        peaks=sum(len(p) for p in all_peaks),
        threshold=params.threshold,
    )
    return all_peaks

# mq_resynth/synthesis/additive.py

from __future__ import annotations
from typing import Sequence

import numpy as np
import structlog

from mq_resynth.types.dataclasses import Track
from mq_resynth.types.schemas import SynthesisParams

logger = structlog.get_logger()


def normalize_peak(buffer: np.ndarray) -> np.ndarray:
    """Normalise en place sur le max absolu ; un buffer silencieux est rendu tel quel."""
    if buffer.size == 0:
        return buffer
    max_amp = float(np.max(np.abs(buffer)))
    if max_amp == 0.0:
        logger.warning("synthesis.silent", samples=int(buffer.size))
        return buffer
    buffer /= max_amp
    return buffer


def _render_track(out: np.ndarray, track: Track, frame_len: int, freq_factor: float) -> None:
    t = np.arange(frame_len, dtype=np.float64)
    start = track.birth * frame_len
    for peak, nxt in zip(track.peaks[:-1], track.peaks[1:]):
        # interpolation linéaire fréquence / amplitude sur le segment
        step_freq = (nxt.freq - peak.freq) / frame_len
        step_amp = (nxt.amp - peak.amp) / frame_len
        inst_amp = peak.amp + step_amp * t
        # phase quadratique, remise à 0 à chaque segment
        phase = freq_factor * t * (peak.freq + step_freq * 0.5 * t)
        out[start:start + frame_len] += 2.0 * inst_amp * np.sin(phase)
        start += frame_len


def synthesize(tracks: Sequence[Track], frame_len: int, sampling_rate: float) -> np.ndarray:
    """
    Synthèse additive des partiels.

    Chaque paire de pics consécutifs d'un partiel couvre `frame_len` échantillons
    à partir de (birth + i) * frame_len. Fréquence et amplitude sont interpolées
    linéairement ; les partiels se superposent puis le buffer est normalisé
    (pic à 1.0).

    Returns:
        np.ndarray float64 de longueur frame_len * max(birth + len(peaks)).
    """
    params = SynthesisParams(frame_len=frame_len, sampling_rate=sampling_rate)
    if not tracks:
        return np.zeros(0, dtype=np.float64)

    num_frames = max(track.end for track in tracks)
    audio = np.zeros(num_frames * params.frame_len, dtype=np.float64)
    freq_factor = 2.0 * np.pi / params.sampling_rate

    for track in tracks:
        _render_track(audio, track, params.frame_len, freq_factor)

    logger.debug(
        "synthesis.rendered",
        tracks=len(tracks),
        samples=int(audio.size),
        frame_len=params.frame_len,
    )
    return normalize_peak(audio)

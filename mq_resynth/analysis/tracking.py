# mq_resynth/analysis/tracking.py — suivi de partiels McAulay-Quatieri

from __future__ import annotations
from bisect import bisect_left
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog

from mq_resynth.analysis.peaks import cap_highest_frequencies
from mq_resynth.types.dataclasses import Peak, Track
from mq_resynth.types.schemas import DEFAULT_MATCHING_RADIUS, TrackingParams

logger = structlog.get_logger()


# ---------------------------
# Utils
# ---------------------------
def find_candidate_index(freq: float, freqs: Sequence[float], radius: float) -> Optional[int]:
    """
    Index de la fréquence de `freqs` (triée croissante) la plus proche de `freq`,
    à au plus `radius` Hz. On n'examine que m-1, m, m+1 autour du point
    d'insertion m.

    ⚠️ Égalité de distance : comme l'implémentation d'origine (premier minimum
    sur m, m-1, m+1), le candidat en m (au-dessus) l'emporte. La règle
    "égalité -> pas de candidat" n'est volontairement PAS appliquée ;
    seule l'absence de pic dans le rayon renvoie None.
    """
    m = bisect_left(freqs, freq)
    candidates = [
        i for i in (m, m - 1, m + 1)
        if 0 <= i < len(freqs) and abs(freqs[i] - freq) <= radius
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda i: abs(freqs[i] - freq))


def _kill(track: Track) -> None:
    # fade-out : dernière fréquence connue, amplitude nulle
    track.peaks.append(Peak(freq=track.last_freq, amp=0.0))


def _birth(frame_idx: int, peak: Peak) -> Track:
    # fade-in : pic synthétique d'amplitude nulle avant l'attaque réelle
    return Track(birth=frame_idx, peaks=[Peak(freq=peak.freq, amp=0.0), peak])


# ---------------------------
# Appariement d'une frame
# ---------------------------
def _match_frame(
    active: List[Track],
    frame: List[Peak],
    frame_idx: int,
    radius: float,
) -> tuple[List[Track], List[Track]]:
    """
    Prolonge les partiels actifs avec les pics de `frame`.
    Retourne (partiels morts dans cette frame, partiels encore actifs).

    Glouton et dépendant de l'ordre : les partiels sont traités une fois,
    par fréquence courante croissante, et consomment le pool de pics au fur
    et à mesure.
    """
    next_peaks = list(frame)
    snapshot = sorted(active, key=lambda t: t.last_freq)
    snapshot_freqs = [t.last_freq for t in snapshot]

    dead: List[Track] = []
    survivors: List[Track] = []

    for pos, track in enumerate(snapshot):
        cur_freq = snapshot_freqs[pos]
        next_freqs = [p.freq for p in next_peaks]
        candidate_idx = find_candidate_index(cur_freq, next_freqs, radius)

        if candidate_idx is None:
            _kill(track)
            dead.append(track)
            continue

        # Un partiel pas encore traité (fréquence >= cur_freq) est-il plus
        # proche de ce candidat ? Le partiel courant fait partie des prétendants.
        unmatched_freqs = snapshot_freqs[pos:]
        possible_idx = find_candidate_index(next_freqs[candidate_idx], unmatched_freqs, radius)

        if possible_idx is not None and unmatched_freqs[possible_idx] == cur_freq:
            track.peaks.append(next_peaks.pop(candidate_idx))
            survivors.append(track)
            continue

        # Le candidat revient à un autre partiel : on tente le pic juste en dessous
        lower_idx = candidate_idx - 1
        if lower_idx < 0 or abs(next_freqs[lower_idx] - cur_freq) > radius:
            _kill(track)
            dead.append(track)
        else:
            track.peaks.append(next_peaks.pop(lower_idx))
            survivors.append(track)

    # Les pics restants sont des naissances
    survivors.extend(_birth(frame_idx, peak) for peak in next_peaks)
    return dead, survivors


def track_partials(
    peaks_frames: Sequence[Sequence[Peak]],
    max_peaks: Optional[int] = None,
    matching_radius: float = DEFAULT_MATCHING_RADIUS,
) -> List[Track]:
    """
    Suivi de partiels (appariement frame à frame McAulay-Quatieri).

    Args:
        peaks_frames: 1er axe = temps, 2e axe = pics triés par fréquence croissante.
        max_peaks: (optionnel) plafonne chaque frame à ses N pics de plus haute
            fréquence avant l'appariement.
        matching_radius: écart max (Hz) pour qu'un pic prolonge un partiel.

    Returns:
        Les partiels dans l'ordre de leur mort, puis ceux encore actifs à la
        dernière frame. ⚠️ Ce n'est PAS un tri par naissance.
    """
    params = TrackingParams(matching_radius=matching_radius, max_peaks=max_peaks)
    if len(peaks_frames) == 0:
        return []

    frames = [cap_highest_frequencies(list(frame), params.max_peaks) for frame in peaks_frames]

    finished: List[Track] = []
    active: List[Track] = [Track(birth=0, peaks=[peak]) for peak in frames[0]]

    for frame_idx in range(1, len(frames)):
        dead, active = _match_frame(active, frames[frame_idx], frame_idx, params.matching_radius)
        finished.extend(dead)

    # Fin du signal : pas de fade-out forcé
    tracks = finished + active

    logger.debug(
        "tracking.done",
        frames=len(frames),
        tracks=len(tracks),
        deaths=len(finished),
        matching_radius=params.matching_radius,
    )
    return tracks


def track_summary(tracks: Sequence[Track]) -> Dict[str, float]:
    """Statistiques rapides pour le debug."""
    if not tracks:
        return {"n_tracks": 0, "n_dead": 0, "mean_length": 0.0, "max_end": 0, "births_after_start": 0}
    lengths = np.array([len(t.peaks) for t in tracks], dtype=float)
    return {
        "n_tracks": len(tracks),
        "n_dead": sum(1 for t in tracks if t.is_dead),
        "mean_length": float(np.mean(lengths)),
        "max_end": max(t.end for t in tracks),
        "births_after_start": sum(1 for t in tracks if t.birth > 0),
    }

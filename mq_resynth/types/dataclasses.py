from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np


@dataclass(frozen=True)
class Peak:
    freq: float   # Hz
    amp: float    # magnitude


@dataclass
class Track:
    """
    Partiel : trajectoire d'un pic à travers des frames consécutives.
    peaks[i] correspond à la frame birth + i ; jamais vide.
    """
    birth: int
    peaks: List[Peak] = field(default_factory=list)

    @property
    def last_freq(self) -> float:
        return self.peaks[-1].freq

    @property
    def end(self) -> int:
        """Index (exclusif) de la frame qui suit la dernière frame du partiel."""
        return self.birth + len(self.peaks)

    @property
    def is_dead(self) -> bool:
        """
        Heuristique : dernier pic d'amplitude nulle = fade-out posé à la mort.
        Valable pour les pics issus de detect_peaks (amp > threshold >= 0).
        Un pic réel d'amplitude 0.0 fourni à la main en dernière position
        serait pris à tort pour une mort.
        """
        return len(self.peaks) > 1 and self.peaks[-1].amp == 0.0


@dataclass
class ResynthesisResult:
    frames: List[List[Peak]] = field(default_factory=list)
    tracks: List[Track] = field(default_factory=list)
    audio: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.float64))
    sample_rate: float = 0.0
    frame_len: int = 0

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.audio.size / self.sample_rate

"""
mq_resynth — analyse / resynthèse sinusoïdale McAulay–Quatieri
--------------------------------------------------------------

Trois étages, enchaînés dans cet ordre :
- détection des pics par frame d'un spectrogramme d'amplitude,
- suivi des pics d'une frame à l'autre en partiels (naissance / mort),
- synthèse additive avec interpolation fréquence / amplitude.

Structure :
    analysis/peaks.py        → detect_peaks
    analysis/tracking.py     → track_partials (appariement glouton)
    synthesis/additive.py    → synthesize
    core/pipeline.py         → resynthesize, resynthesize_signal
    preprocessing/stft.py    → spectrogramme librosa (frames x bins)
    utils/serialize.py       → export JSON des partiels
"""

from .types.dataclasses import Peak, Track, ResynthesisResult
from .analysis.peaks import detect_peaks
from .analysis.tracking import track_partials, track_summary
from .synthesis.additive import synthesize
from .core.pipeline import resynthesize, resynthesize_signal

__all__ = [
    "Peak",
    "Track",
    "ResynthesisResult",
    "detect_peaks",
    "track_partials",
    "track_summary",
    "synthesize",
    "resynthesize",
    "resynthesize_signal",
]

# mq_resynth/utils/serialize.py
from typing import Any, Dict, List, Sequence

from mq_resynth.types.dataclasses import Peak, Track
from mq_resynth.types.schemas import PeakModel, TrackModel


def tracks_to_records(tracks: Sequence[Track]) -> List[Dict[str, Any]]:
    """Partiels -> liste de dicts JSON-compatibles (validés par TrackModel)."""
    return [
        TrackModel(
            birth=t.birth,
            peaks=[PeakModel(freq=p.freq, amp=p.amp) for p in t.peaks],
        ).model_dump()
        for t in tracks
    ]


def tracks_from_records(records: Sequence[Dict[str, Any]]) -> List[Track]:
    """Inverse de tracks_to_records ; lève ValidationError sur un record invalide."""
    tracks = []
    for rec in records:
        model = TrackModel.model_validate(rec)
        tracks.append(Track(birth=model.birth, peaks=[Peak(freq=p.freq, amp=p.amp) for p in model.peaks]))
    return tracks

# mq_resynth/types/schemas.py
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

DEFAULT_MATCHING_RADIUS = 200.0  # Hz


# ────────────────────────────────────────────────────────────────────────────
# Paramètres des étages d'analyse / synthèse
# ────────────────────────────────────────────────────────────────────────────
class PeakDetectionParams(BaseModel):
    sample_rate: float = Field(..., gt=0, description="Sampling rate of the analysed audio (Hz)")
    threshold: float = Field(..., ge=0, description="Minimum magnitude for a peak")
    max_peaks: Optional[int] = Field(None, ge=0, description="Keep only the N highest-frequency peaks")


class TrackingParams(BaseModel):
    matching_radius: float = Field(DEFAULT_MATCHING_RADIUS, gt=0, description="Max |Δf| (Hz) to continue a track")
    max_peaks: Optional[int] = Field(None, ge=0, description="Per-frame cap applied before matching")


class SynthesisParams(BaseModel):
    frame_len: int = Field(..., gt=0, description="Samples per analysis frame (hop size)")
    sampling_rate: float = Field(..., gt=0, description="Output sampling rate (Hz)")


# ────────────────────────────────────────────────────────────────────────────
# Export des partiels (JSON pour une UI externe)
# ────────────────────────────────────────────────────────────────────────────
class PeakModel(BaseModel):
    freq: float = Field(..., ge=0)
    amp: float = Field(..., ge=0)


class TrackModel(BaseModel):
    birth: int = Field(..., ge=0)
    peaks: List[PeakModel]

    @field_validator("peaks")
    @classmethod
    def validate_peaks(cls, v: List[PeakModel]) -> List[PeakModel]:
        if not v:
            raise ValueError("A track needs at least one peak")
        return v

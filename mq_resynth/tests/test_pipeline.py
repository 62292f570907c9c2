import numpy as np
import pytest

from mq_resynth import resynthesize, resynthesize_signal
from mq_resynth.config import Settings
from mq_resynth.utils.serialize import tracks_from_records, tracks_to_records


def _bump_spectrogram(n_frames: int = 10, bins: int = 64, peak_bin: int = 10) -> np.ndarray:
    spec = np.zeros((n_frames, bins))
    spec[:, peak_bin] = 1.0
    spec[:, peak_bin - 1] = spec[:, peak_bin + 1] = 0.3
    return spec


def test_resynthesize_single_partial():
    # sr=12800, 64 bins -> 100 Hz par bin, pic au bin 10 -> 1000 Hz
    res = resynthesize(_bump_spectrogram(), sample_rate=12800, frame_len=64, threshold=0.1)

    assert len(res.frames) == 10
    assert all(len(f) == 1 and f[0].freq == 1000.0 for f in res.frames)
    assert len(res.tracks) == 1
    assert res.tracks[0].birth == 0 and len(res.tracks[0].peaks) == 10
    assert res.audio.size == 640
    assert np.max(np.abs(res.audio)) == pytest.approx(1.0)
    assert res.duration == pytest.approx(640 / 12800)


def test_resynthesize_uses_settings_defaults():
    res = resynthesize(_bump_spectrogram(n_frames=3), sample_rate=12800, frame_len=32)
    # seuil par défaut (0.01) : seul le bin 10 est un maximum local
    assert [len(f) for f in res.frames] == [1, 1, 1]


def test_silent_spectrogram_gives_silence():
    res = resynthesize(np.zeros((5, 16)), sample_rate=8000, frame_len=32, threshold=0.0)
    assert res.tracks == []
    assert res.audio.size == 0


def test_resynthesize_signal_finds_a4():
    sr = 22050
    t = np.arange(sr, dtype=np.float32) / sr
    y = 0.8 * np.sin(2 * np.pi * 440.0 * t)

    res = resynthesize_signal(y, sr, n_fft=2048, hop_length=512, threshold=50.0)

    assert res.frame_len == 512
    assert res.audio.size % 512 == 0
    freqs = [np.median([p.freq for p in tr.peaks]) for tr in res.tracks]
    assert any(abs(f - 440.0) < 20.0 for f in freqs), f"Pas de partiel vers 440 Hz: {freqs}"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MQ_RESYNTH_MATCHING_RADIUS", "50")
    monkeypatch.setenv("MQ_RESYNTH_HOP_LENGTH", "256")
    s = Settings()
    assert s.matching_radius == 50.0
    assert s.hop_length == 256


def test_track_records_roundtrip_and_validation():
    res = resynthesize(_bump_spectrogram(n_frames=4), sample_rate=12800, frame_len=16, threshold=0.1)
    records = tracks_to_records(res.tracks)
    assert records[0]["birth"] == 0
    assert records[0]["peaks"][0] == {"freq": 1000.0, "amp": 1.0}
    assert tracks_from_records(records) == res.tracks

    with pytest.raises(ValueError):
        tracks_from_records([{"birth": 0, "peaks": []}])
    with pytest.raises(ValueError):
        tracks_from_records([{"birth": -1, "peaks": [{"freq": 1.0, "amp": 1.0}]}])

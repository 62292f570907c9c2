import numpy as np
import pytest

from mq_resynth.analysis.peaks import detect_peaks


def test_local_maxima_above_threshold():
    # sr=10, 5 bins -> 1 Hz par bin
    frames = detect_peaks([[0.0, 1.0, 0.0, 2.0, 0.0]], sample_rate=10, threshold=0.5)
    assert [(p.freq, p.amp) for p in frames[0]] == [(1.0, 1.0), (3.0, 2.0)]

    frames = detect_peaks([[0.0, 1.0, 0.0, 2.0, 0.0]], sample_rate=10, threshold=1.5)
    assert [p.freq for p in frames[0]] == [3.0]


def test_threshold_is_strict_and_plateaus_are_not_peaks():
    frames = detect_peaks([[0.0, 1.0, 0.0], [0.0, 1.0, 1.0, 0.0]], sample_rate=100, threshold=1.0)
    assert frames == [[], []]


def test_first_and_last_bins_are_never_peaks():
    frames = detect_peaks([[5.0, 0.0, 5.0]], sample_rate=100, threshold=0.0)
    assert frames == [[]]


def test_max_peaks_keeps_highest_frequencies_not_highest_amplitudes():
    spec = [[0.0, 9.0, 0.0, 5.0, 0.0, 1.0, 0.0]]
    frames = detect_peaks(spec, sample_rate=14, threshold=0.0, max_peaks=2)
    assert [p.amp for p in frames[0]] == [5.0, 1.0]

    assert detect_peaks(spec, sample_rate=14, threshold=0.0, max_peaks=0) == [[]]
    assert len(detect_peaks(spec, sample_rate=14, threshold=0.0, max_peaks=10)[0]) == 3


def test_random_spectrogram_properties():
    rng = np.random.default_rng(0)
    spec = rng.random((20, 64))
    thr = 0.3
    for frame in detect_peaks(spec, sample_rate=44100, threshold=thr):
        freqs = [p.freq for p in frame]
        assert all(a < b for a, b in zip(freqs, freqs[1:])), f"Pas strictement croissant: {freqs}"
        assert all(p.amp > thr for p in frame)


def test_scaling_amplitudes_and_threshold_keeps_frequencies():
    rng = np.random.default_rng(1)
    spec = rng.random((10, 32))
    ref = detect_peaks(spec, 8000, 0.4)
    for scale in (0.5, 2.0, 4.0):
        scaled = detect_peaks(spec * scale, 8000, 0.4 * scale)
        assert [[p.freq for p in f] for f in scaled] == [[p.freq for p in f] for f in ref]


def test_empty_spectrogram():
    assert detect_peaks([], sample_rate=44100, threshold=0.1) == []


@pytest.mark.parametrize(
    "spec, sr, thr",
    [
        ([[1.0, 2.0]], 44100, 0.1),       # < 3 bins
        ([[0.0, 1.0, 0.0]], -1.0, 0.1),   # sample rate négatif
        ([[0.0, 1.0, 0.0]], 0.0, 0.1),
        ([[0.0, 1.0, 0.0]], 44100, -0.1), # seuil négatif
    ],
)
def test_invalid_input_fails_fast(spec, sr, thr):
    with pytest.raises(ValueError):
        detect_peaks(spec, sample_rate=sr, threshold=thr)

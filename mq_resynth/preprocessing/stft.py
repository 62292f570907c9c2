import numpy as np
import librosa


def magnitude_frames(signal: np.ndarray, n_fft: int = 2048, hop_length: int = 512) -> np.ndarray:
    """
    Spectrogramme d'amplitude au format (frames x bins) attendu par detect_peaks.
    librosa renvoie (bins x frames) ; on transpose.

    Note : librosa donne n_fft/2 + 1 bins, detect_peaks mappe le bin i sur
    i * sr / (2 * bins), soit un léger biais vers le grave (< 1 bin).
    """
    y = np.asarray(signal, dtype=np.float32)
    if y.ndim != 1:
        raise ValueError(f"Mono signal expected, got shape {y.shape}")
    S = np.abs(librosa.stft(y, n_fft=n_fft, hop_length=hop_length))
    return np.ascontiguousarray(S.T, dtype=np.float64)

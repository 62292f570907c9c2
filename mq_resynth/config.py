"""mq_resynth global configuration."""

from pydantic_settings import BaseSettings

from mq_resynth.types.schemas import DEFAULT_MATCHING_RADIUS


class Settings(BaseSettings):
    """Default analysis/synthesis parameters, overridable from the environment."""

    # Peak detection
    threshold: float = 0.01
    max_peaks: int | None = None

    # Partial tracking
    matching_radius: float = DEFAULT_MATCHING_RADIUS

    # STFT / synthesis
    n_fft: int = 2048
    hop_length: int = 512

    model_config = {"env_prefix": "MQ_RESYNTH_"}


settings = Settings()

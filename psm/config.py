"""Engine configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for the swap engine.

    Attributes:
        max_rate_duration: Maximum seconds the engine will compound the
            redemption rate past the last checkpoint. Projection cost grows
            with log2 of the duration; None disables the bound.
        log_failures: If True, failed operations are logged at debug level
            with their inputs.
    """

    max_rate_duration: int | None = None
    log_failures: bool = True


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from settings import Settings, get_settings


@dataclass(frozen=True)
class CLIConfig:
    sources: Tuple[str, ...]
    base_dir: Path
    window: int
    pm_window: int
    fetch_timeout: float

    def to_settings(self, log_level: str) -> Settings:
        return Settings(
            sources=self.sources,
            base_dir=str(self.base_dir),
            window=self.window,
            pm_window=self.pm_window,
            fetch_timeout=self.fetch_timeout,
            log_level=log_level,
        )


def _positive(value: Optional[float], default):
    if value is None or value <= 0:
        return default
    return value


def load_config(
    sources: Optional[Sequence[str]] = None,
    base_dir: Optional[Path] = None,
    window: Optional[int] = None,
    pm_window: Optional[int] = None,
    fetch_timeout: Optional[float] = None,
) -> CLIConfig:
    """Merge command-line overrides over the environment settings."""
    settings = get_settings()
    return CLIConfig(
        sources=tuple(sources) if sources else settings.sources,
        base_dir=base_dir or Path(settings.base_dir),
        window=int(_positive(window, settings.window)),
        pm_window=int(_positive(pm_window, settings.pm_window)),
        fetch_timeout=float(_positive(fetch_timeout, settings.fetch_timeout)),
    )

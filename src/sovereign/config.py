"""Global configuration — XDG paths, env vars, defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sovereign"
    return Path.home() / ".config" / "sovereign"


@dataclass
class SovereignConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    registry_paths: list[Path] = field(default_factory=list)
    min_score: int = 95  # Pre-build audit gate
    max_file_size: int = 1_000_000
    verbose: bool = False

    @classmethod
    def load(cls) -> SovereignConfig:
        """Load config from environment variables with XDG defaults."""
        config = cls()

        env_min_score = os.environ.get("SOVEREIGN_MIN_SCORE")
        if env_min_score:
            config.min_score = int(env_min_score)

        env_max_size = os.environ.get("SOVEREIGN_MAX_FILE_SIZE")
        if env_max_size:
            config.max_file_size = int(env_max_size)

        # Registry extension in the config dir is applied first
        default_registry = config.config_dir / "registry.yaml"
        if default_registry.is_file():
            config.registry_paths.append(default_registry)

        env_registry = os.environ.get("SOVEREIGN_REGISTRY")
        if env_registry:
            config.registry_paths.append(Path(env_registry))

        return config

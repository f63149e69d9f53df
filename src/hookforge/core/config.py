"""Runtime configuration for hookforge tooling."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MANIFEST = "hookforge.yaml"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class HookforgeConfig:
    """Settings shared by the CLI and manifest loading.

    Attributes:
        manifest_path: Manifest file used when none is given explicitly
        log_level: Name of the root logging level
    """

    manifest_path: Path
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> HookforgeConfig:
        """Create config from environment variables.

        Resolution order for the manifest:
        1. HOOKFORGE_MANIFEST env var
        2. Default: {base_path}/hookforge.yaml, or ./hookforge.yaml

        The log level comes from HOOKFORGE_LOG_LEVEL (default WARNING).
        """
        manifest = os.environ.get("HOOKFORGE_MANIFEST")
        if manifest:
            manifest_path = Path(manifest)
        elif base_path:
            manifest_path = base_path / DEFAULT_MANIFEST
        else:
            manifest_path = Path(DEFAULT_MANIFEST)

        log_level = os.environ.get("HOOKFORGE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        return cls(manifest_path=manifest_path, log_level=log_level)

    @property
    def level(self) -> int:
        """Numeric logging level.

        Raises:
            ValueError: If log_level is not a standard level name
        """
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(
                f"Unknown log level '{self.log_level}'. "
                "Expected one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return level


def configure_logging(config: HookforgeConfig) -> None:
    """Apply the configured level to hookforge's loggers."""
    logging.basicConfig(
        level=config.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("hookforge").setLevel(config.level)

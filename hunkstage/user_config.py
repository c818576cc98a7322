"""Repository configuration management for hunkstage.

Handles reading and writing the .hunkstage/config.yaml file in each repository.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


class StagingConfig(BaseModel):
    """Settings for the staging panel."""

    # Lines kept visible below the cursor when a hunk is taller than the view
    context_lines: int = Field(default=3, ge=0)
    # Fixed viewport height; None means use the terminal height
    viewport_height: Optional[int] = Field(default=None, ge=1)
    # Keep generated patch files under .tmp/ for debugging
    keep_patches: bool = False
    color: bool = True


def get_config_dir(repo_root: Path) -> Path:
    """Get the repository config directory.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .hunkstage/
    """
    return repo_root / ".hunkstage"


def get_config_file(repo_root: Path) -> Path:
    """Return path to the config.yaml file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .hunkstage/config.yaml.
    """
    return get_config_dir(repo_root) / "config.yaml"


def load_config(repo_root: Path) -> StagingConfig:
    """Load the hunkstage configuration from config.yaml.

    Missing keys take their defaults and unknown keys are ignored. A missing
    or unreadable file yields the default configuration.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Validated configuration.
    """
    config_file = get_config_file(repo_root)

    if not config_file.exists():
        return StagingConfig()

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return StagingConfig()
        return StagingConfig.model_validate(data)
    except (yaml.YAMLError, ValidationError, OSError):
        # If config is corrupted, return defaults
        return StagingConfig()


def save_config(repo_root: Path, config: StagingConfig) -> Path:
    """Save the configuration to config.yaml.

    Args:
        repo_root: The root directory of the git repository.
        config: Configuration to save.

    Returns:
        Path of the written file.
    """
    config_file = get_config_file(repo_root)

    # Ensure directory exists
    config_file.parent.mkdir(exist_ok=True)

    with open(config_file, "w") as f:
        yaml.dump(
            config.model_dump(),
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    return config_file

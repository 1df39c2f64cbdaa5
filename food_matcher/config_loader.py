"""
Configuration loader for the ingredient matcher.

Loads the gotcha tables (and optional threshold overrides) from YAML and
computes a deterministic fingerprint for drift detection.
"""
import hashlib
import json
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .alignment.gotchas import VetoTables, veto_tables_from_config
from .config.feature_flags import FLAGS, parse_threshold
from .types import MatchThresholds


@dataclass
class MatcherConfig:
    """Loaded matcher configuration with version tracking."""
    gotchas: Dict[str, Any]
    thresholds: Dict[str, Any]
    veto_tables: VetoTables
    config_version: str
    config_fingerprint: str

    def match_thresholds(self) -> MatchThresholds:
        """Thresholds from thresholds.yml, falling back to FLAGS per key."""
        defaults = FLAGS.thresholds()
        return MatchThresholds(
            hard=_threshold_value(self.thresholds.get("hard"), defaults.hard),
            soft=_threshold_value(self.thresholds.get("soft"), defaults.soft),
            perfect_token_floor=_threshold_value(
                self.thresholds.get("perfect_token_floor"), defaults.perfect_token_floor
            ),
        )


def _threshold_value(value: Optional[Any], fallback: int) -> int:
    if value is None:
        return fallback
    return parse_threshold(str(value), fallback)


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file."""
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def load_matcher_config(root: str = "configs") -> MatcherConfig:
    """
    Load matcher configs from directory and compute version fingerprint.

    Files:
        match_gotchas.yml   required
        thresholds.yml      optional (hard / soft / perfect_token_floor)

    Args:
        root: Path to configs directory (default: "configs/")

    Returns:
        MatcherConfig with loaded configs and version tracking

    Raises:
        FileNotFoundError: If match_gotchas.yml is missing
        ValueError: If a config file is not a mapping or a gotcha record is malformed
    """
    root_path = Path(root)

    config_files = {
        "gotchas": root_path / "match_gotchas.yml",
        "thresholds": root_path / "thresholds.yml",
    }

    data = {}
    for key, path in config_files.items():
        if path.exists():
            data[key] = _load_yaml(path)
        elif key == "thresholds":
            data[key] = {}
        else:
            raise FileNotFoundError(f"Required config file not found: {path}")

        if not isinstance(data[key], dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

    veto_tables = veto_tables_from_config(data["gotchas"])

    # Sort keys to ensure stability across reordered YAML
    blob = json.dumps(data, sort_keys=True).encode("utf-8")
    fingerprint = hashlib.sha256(blob).hexdigest()[:12]
    config_version = f"configs@{fingerprint}"

    return MatcherConfig(
        gotchas=data["gotchas"],
        thresholds=data["thresholds"],
        veto_tables=veto_tables,
        config_version=config_version,
        config_fingerprint=fingerprint,
    )


def get_code_git_sha() -> str:
    """
    Get current Git SHA for code version tracking.

    Returns:
        12-character Git SHA, else CODE_GIT_SHA env var, else "unknown"
    """
    try:
        sha = subprocess.check_output(
            ["git", "rev-parse", "HEAD"],
            stderr=subprocess.DEVNULL
        ).decode().strip()
        return sha[:12]
    except (subprocess.CalledProcessError, FileNotFoundError):
        return os.getenv("CODE_GIT_SHA", "unknown")

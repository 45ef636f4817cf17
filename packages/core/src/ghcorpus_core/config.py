import os
from pathlib import Path
from typing import Optional

import yaml

# Automation accounts whose issues and comments never reach the corpus.
DEFAULT_EXCLUDED_AUTHORS: frozenset = frozenset(
    {
        "??",
        "maestro-bot",
        "dotnet-policy-service",
        "dotnet-issue-labeler",
        "dotnet-maestro",
        "azure-pipelines",
        "ryujit-bot",
    }
)

DEFAULT_CONFIG: dict = {
    "excluded_authors": sorted(DEFAULT_EXCLUDED_AUTHORS),
    "extra_excluded_authors": [],  # added on top of excluded_authors (e.g. repo-specific bots)
    "output_dir": None,  # None = current working directory
}


def load_config(config_path: str = ".ghcorpus.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. GHCORPUS_OUTPUT_DIR environment variable (output_dir only)
      3. .ghcorpus.yml in the current directory
      4. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "excluded_authors": list(DEFAULT_CONFIG["excluded_authors"]),
        "extra_excluded_authors": list(DEFAULT_CONFIG["extra_excluded_authors"]),
    }

    env_output_dir = os.environ.get("GHCORPUS_OUTPUT_DIR")
    if env_output_dir:
        config["output_dir"] = env_output_dir

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def excluded_authors_from_config(config: dict) -> frozenset:
    """Return the full excluded-author set: the base list plus any extras."""
    base = config.get("excluded_authors")
    if base is None:
        base = DEFAULT_EXCLUDED_AUTHORS
    extra = config.get("extra_excluded_authors") or []
    return frozenset(base) | frozenset(extra)

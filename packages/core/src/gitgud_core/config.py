import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "host": "0.0.0.0",
    "port": 8080,
    "store": "sqlite",  # "sqlite" | "noop"
    "store_path": ".gitgud.db",
    "max_workers": 4,
    "request_timeout": 30,  # seconds per GitHub HTTP call
    "analysis_timeout": 120,  # seconds per pipeline run started from the API
    "github_base_url": "https://api.github.com",
    "api_tokens": [],
    "log_level": "INFO",
}


def load_config(config_path: str = ".gitgud.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .gitgud.yml in the current directory
      3. Environment variables (PORT, GITGUD_API_TOKENS)
      4. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "api_tokens": list(DEFAULT_CONFIG["api_tokens"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path}: expected a mapping at the top level")
        config.update(file_config)

    port = os.environ.get("PORT")
    if port:
        config["port"] = int(port)

    env_tokens = os.environ.get("GITGUD_API_TOKENS", "")
    extra_tokens = [t.strip() for t in env_tokens.split(",") if t.strip()]
    config["api_tokens"] = list(config.get("api_tokens") or []) + extra_tokens

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = resolve_github_token()

    return config


def resolve_github_token() -> Optional[str]:
    """Return a GitHub token or None if no source is available.

    Resolution order:
      1. GITHUB_TOKEN environment variable
      2. `gh auth token` (GitHub CLI session)

    Never raises. Anonymous access still works for public repositories,
    within GitHub's much lower unauthenticated rate limit.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Resolved GitHub token via gh CLI session.")
        return result.stdout.strip()
    return None

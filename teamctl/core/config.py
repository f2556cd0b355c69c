# teamctl/core/config.py

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from teamctl.core.errors import SettingsError

TEAMCTL_CONFIG_DIR = Path.home() / ".config" / "teamctl"
SETTINGS_FILE = TEAMCTL_CONFIG_DIR / "config.yaml"

GITHUB_URL = "https://github.com"

DEFAULT_NAMESPACE = "jx"
DEV_ENVIRONMENT_NAME = "dev"

SERVICE_ACCOUNT_NAMESPACE_FILE = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")

ENVIRONMENT_CRD_GROUP = "jenkins.io"
ENVIRONMENT_CRD_VERSION = "v1"
ENVIRONMENT_CRD_PLURAL = "environments"
ENVIRONMENT_CRD_KIND = "Environment"
ENVIRONMENT_CRD_NAME = f"{ENVIRONMENT_CRD_PLURAL}.{ENVIRONMENT_CRD_GROUP}"

DEFAULT_SETTINGS = {
    "namespace": None,
    "context": None,
    "batch_mode": False,
    "update_retries": 5,
}

ENV_OVERRIDES = {
    "TEAMCTL_NAMESPACE": "namespace",
    "TEAMCTL_CONTEXT": "context",
    "TEAMCTL_BATCH_MODE": "batch_mode",
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Loads the teamctl settings.

    Values come from the YAML settings file (if present) and are then
    overridden by TEAMCTL_* environment variables. Unknown keys in the
    file are ignored.
    """
    path = Path(path) if path else SETTINGS_FILE
    environ = os.environ if environ is None else environ
    settings = dict(DEFAULT_SETTINGS)

    if path.exists():
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SettingsError(f"Could not parse settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        for key in DEFAULT_SETTINGS:
            if key in data:
                settings[key] = data[key]

    for var, key in ENV_OVERRIDES.items():
        if environ.get(var):
            settings[key] = _parse_bool(environ[var]) if key == "batch_mode" else environ[var]

    if not isinstance(settings["batch_mode"], bool):
        raise SettingsError("'batch_mode' must be true or false")
    retries = settings["update_retries"]
    if isinstance(retries, bool) or not isinstance(retries, int) or retries < 1:
        raise SettingsError("'update_retries' must be a positive integer")

    return settings

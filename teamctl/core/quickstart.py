# teamctl/core/quickstart.py
"""
Core quickstart location management for teamctl.

A quickstart location is a (git URL, owner) pair stored in the team settings
of the dev Environment custom resource. All location operations go through
these functions so the CLI stays a thin presentation layer.

ARCHITECTURE:
=============
- Public functions return JSON-serializable dictionaries
- Progress callbacks are separate from return values
- Consistent error format: {"success": false, "error": "message"}
- Interactive choices are delegated to an injected picker
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from kubernetes.client.rest import ApiException

from teamctl.core.config import DEFAULT_NAMESPACE, GITHUB_URL, load_settings
from teamctl.core.errors import (
    LocationNotFoundError,
    MissingOptionError,
    NoSelectionError,
    TeamctlError,
)
from teamctl.core.kube import (
    KubeClient,
    get_dev_environment,
    kube_client_and_dev_namespace,
    modify_dev_environment,
    register_environment_crd,
)
from teamctl.core.utils import url_join

logger = logging.getLogger(__name__)

OPTION_GIT_URL = "url"
OPTION_OWNER = "owner"

PICK_OWNER_MESSAGE = "Pick the quickstart git owner to remove from the team settings: "

Picker = Callable[[List[str], str], Optional[str]]


@dataclass
class QuickstartLocation:
    git_url: str
    owner: str
    git_kind: str = ""
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuickstartLocation":
        return cls(
            git_url=data.get("gitUrl") or "",
            owner=data.get("owner") or "",
            git_kind=data.get("gitKind") or "",
            includes=list(data.get("includes") or []),
            excludes=list(data.get("excludes") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gitUrl": self.git_url,
            "owner": self.owner,
            "gitKind": self.git_kind,
            "includes": list(self.includes),
            "excludes": list(self.excludes),
        }

    @property
    def key(self) -> str:
        return url_join(self.git_url, self.owner)

    def matches(self, git_url: str, owner: str) -> bool:
        return self.git_url == git_url and self.owner == owner


def _team_locations(env: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Returns the live quickstartLocations list of an Environment, creating it if absent."""
    settings = env.setdefault("spec", {}).setdefault("teamSettings", {})
    if settings.get("quickstartLocations") is None:
        settings["quickstartLocations"] = []
    return settings["quickstartLocations"]


def locations_from_environment(env: Dict[str, Any]) -> List[QuickstartLocation]:
    team_settings = (env.get("spec") or {}).get("teamSettings") or {}
    return [QuickstartLocation.from_dict(loc) for loc in team_settings.get("quickstartLocations") or []]


def get_quickstart_locations(kube: KubeClient, namespace: str) -> List[QuickstartLocation]:
    """Reads the quickstart locations configured for the team."""
    return locations_from_environment(get_dev_environment(kube, namespace))


def resolve_target(
    locations: List[QuickstartLocation],
    git_url: str,
    owner: str,
    batch_mode: bool,
    picker: Optional[Picker] = None
) -> Tuple[str, str]:
    """
    Works out which (git URL, owner) pair to remove.

    Explicit values win. Otherwise batch mode fails on the first missing
    option and interactive mode asks the picker to choose one of the
    existing locations by its joined URL.
    """
    if git_url and owner:
        return git_url, owner

    if batch_mode:
        if not git_url:
            raise MissingOptionError(OPTION_GIT_URL)
        raise MissingOptionError(OPTION_OWNER)

    by_key = {}
    names = []
    for loc in locations:
        by_key[loc.key] = loc
        names.append(loc.key)

    name = picker(names, PICK_OWNER_MESSAGE) if picker else None
    if not name:
        raise NoSelectionError("No owner name chosen")
    chosen = by_key[name]
    return chosen.git_url, chosen.owner


def remove_location_callback(git_url: str, owner: str) -> Callable[[Dict[str, Any]], QuickstartLocation]:
    """
    Builds the Environment mutation that removes the first location matching
    (git_url, owner). The order of the remaining locations is preserved.
    """
    def callback(env: Dict[str, Any]) -> QuickstartLocation:
        locations = _team_locations(env)
        for i, data in enumerate(locations):
            loc = QuickstartLocation.from_dict(data)
            if loc.matches(git_url, owner):
                del locations[i]
                return loc
        raise LocationNotFoundError(git_url, owner)

    return callback


def _api_error_message(e: ApiException) -> str:
    """Formats an ApiException, keeping the server's own message from the body."""
    message = f"Kubernetes API error ({e.status}): {e.reason}"
    body = e.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body:
        return message
    try:
        detail = json.loads(body)
    except ValueError:
        detail = body
    if isinstance(detail, dict):
        detail = detail.get("message") or body
    return f"{message}: {detail}"


def _error_result(e: Exception) -> Dict[str, Any]:
    if isinstance(e, ApiException):
        message = _api_error_message(e)
    else:
        message = str(e)
    return {
        "success": False,
        "error": message,
        "error_type": type(e).__name__,
    }


def _connect(
    kube: Optional[KubeClient],
    namespace: Optional[str],
    settings: Dict[str, Any]
) -> Tuple[KubeClient, str]:
    if kube is None:
        kube, resolved = kube_client_and_dev_namespace(settings)
        namespace = namespace or resolved
    return kube, namespace or settings.get("namespace") or DEFAULT_NAMESPACE


def list_quickstart_locations(
    kube: Optional[KubeClient] = None,
    namespace: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
    progress_callback: Optional[Callable] = None
) -> Dict[str, Any]:
    """
    Lists the quickstart locations configured for the team.

    Returns:
        Dict with structure:
        {
            "success": bool,
            "namespace": str,
            "locations": [
                {
                    "gitUrl": str,
                    "owner": str,
                    "gitKind": str,
                    "includes": [str],
                    "excludes": [str]
                }
            ],
            "total_count": int
        }

    On error:
        {
            "success": false,
            "error": "error message",
            "error_type": str
        }
    """
    def report_progress(message):
        if progress_callback:
            progress_callback(message)
        else:
            logger.info(message)

    try:
        settings = settings if settings is not None else load_settings()
        kube, namespace = _connect(kube, namespace, settings)
        register_environment_crd(kube)

        report_progress(f"Reading quickstart locations in namespace '{namespace}'...")
        locations = get_quickstart_locations(kube, namespace)

        return {
            "success": True,
            "namespace": namespace,
            "locations": [loc.to_dict() for loc in locations],
            "total_count": len(locations)
        }

    except (TeamctlError, ApiException) as e:
        return _error_result(e)
    except Exception as e:
        logger.exception("Unexpected error listing quickstart locations")
        return _error_result(e)


def delete_quickstart_location(
    git_url: str = GITHUB_URL,
    owner: str = "",
    batch_mode: bool = False,
    picker: Optional[Picker] = None,
    kube: Optional[KubeClient] = None,
    namespace: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
    progress_callback: Optional[Callable] = None
) -> Dict[str, Any]:
    """
    Removes one quickstart location from the team settings.

    Args:
        git_url: URL of the git service of the location
        owner: User or organisation of the location
        batch_mode: Fail instead of prompting when git_url or owner is empty
        picker: Function choosing one of a list of names, returning None if
            nothing was chosen
        kube: Client to use; built from settings when omitted
        namespace: Dev namespace; resolved from settings when omitted
        settings: Loaded settings; read from the settings file when omitted
        progress_callback: Optional function for progress updates

    Returns:
        Dict with structure:
        {
            "success": bool,
            "git_url": str,
            "owner": str,
            "namespace": str,
            "message": str
        }

    On error:
        {
            "success": false,
            "error": "error message",
            "error_type": str
        }
    """
    def report_progress(message):
        if progress_callback:
            progress_callback(message)
        else:
            logger.info(message)

    try:
        settings = settings if settings is not None else load_settings()
        kube, namespace = _connect(kube, namespace, settings)
        register_environment_crd(kube)

        locations = get_quickstart_locations(kube, namespace)
        git_url, owner = resolve_target(locations, git_url, owner, batch_mode, picker)

        report_progress(f"Updating team settings in namespace '{namespace}'...")

        removed = modify_dev_environment(
            kube,
            namespace,
            remove_location_callback(git_url, owner),
            retries=settings.get("update_retries", 5),
        )

        message = f"Removing quickstart git owner {removed.key}"

        return {
            "success": True,
            "git_url": removed.git_url,
            "owner": removed.owner,
            "namespace": namespace,
            "message": message
        }

    except (TeamctlError, ApiException) as e:
        return _error_result(e)
    except Exception as e:
        logger.exception("Unexpected error deleting quickstart location")
        return _error_result(e)

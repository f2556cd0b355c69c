# teamctl/core/kube.py
"""
Kubernetes access for teamctl.

Wraps the official kubernetes client for the handful of calls teamctl needs:
resolving the team's dev namespace, registering the Environment CRD and
reading/updating the dev Environment custom resource with optimistic
concurrency.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException

from teamctl.core.config import (
    DEFAULT_NAMESPACE,
    DEV_ENVIRONMENT_NAME,
    ENVIRONMENT_CRD_GROUP,
    ENVIRONMENT_CRD_KIND,
    ENVIRONMENT_CRD_NAME,
    ENVIRONMENT_CRD_PLURAL,
    ENVIRONMENT_CRD_VERSION,
    SERVICE_ACCOUNT_NAMESPACE_FILE,
)
from teamctl.core.errors import EnvironmentNotFoundError, KubeClientError, UpdateConflictError

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


class KubeClient:
    """The API groups teamctl talks to, built from one configuration."""

    def __init__(self, custom_objects, apiextensions):
        self.custom_objects = custom_objects
        self.apiextensions = apiextensions


def _current_context_namespace(context: Optional[str]) -> Optional[str]:
    try:
        contexts, active = k8s_config.list_kube_config_contexts()
    except (k8s_config.ConfigException, FileNotFoundError):
        return None
    if context:
        active = next((c for c in contexts if c.get('name') == context), active)
    if not active:
        return None
    return active.get('context', {}).get('namespace')


def _service_account_namespace() -> Optional[str]:
    if not SERVICE_ACCOUNT_NAMESPACE_FILE.exists():
        return None
    return SERVICE_ACCOUNT_NAMESPACE_FILE.read_text().strip() or None


def kube_client_and_dev_namespace(settings: Dict[str, Any]) -> Tuple[KubeClient, str]:
    """
    Builds a KubeClient and resolves the namespace of the team's dev environment.

    In-cluster configuration is used when available, otherwise the local
    kubeconfig (optionally a specific context). The namespace is the one from
    settings, else the pod's service-account namespace when in-cluster or the
    current context's namespace, else the default.
    """
    context = settings.get("context")
    try:
        k8s_config.load_incluster_config()
        logger.debug("Using in-cluster Kubernetes configuration")
        in_cluster = True
    except k8s_config.ConfigException:
        try:
            k8s_config.load_kube_config(context=context)
        except (k8s_config.ConfigException, FileNotFoundError) as e:
            raise KubeClientError(f"Could not load Kubernetes configuration: {e}") from e
        in_cluster = False

    namespace = settings.get("namespace")
    if not namespace:
        namespace = _service_account_namespace() if in_cluster else _current_context_namespace(context)
    namespace = namespace or DEFAULT_NAMESPACE
    logger.debug(f"Using dev namespace '{namespace}'")

    kube = KubeClient(
        custom_objects=k8s_client.CustomObjectsApi(),
        apiextensions=k8s_client.ApiextensionsV1Api(),
    )
    return kube, namespace


def _environment_crd() -> Dict[str, Any]:
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": ENVIRONMENT_CRD_NAME},
        "spec": {
            "group": ENVIRONMENT_CRD_GROUP,
            "scope": "Namespaced",
            "names": {
                "kind": ENVIRONMENT_CRD_KIND,
                "listKind": f"{ENVIRONMENT_CRD_KIND}List",
                "plural": ENVIRONMENT_CRD_PLURAL,
                "singular": "environment",
                "shortNames": ["env"],
            },
            "versions": [{
                "name": ENVIRONMENT_CRD_VERSION,
                "served": True,
                "storage": True,
                "schema": {
                    "openAPIV3Schema": {
                        "type": "object",
                        "x-kubernetes-preserve-unknown-fields": True,
                    }
                },
            }],
        },
    }


def register_environment_crd(kube: KubeClient) -> None:
    """Registers the Environment CRD, treating an existing registration as success."""
    try:
        kube.apiextensions.create_custom_resource_definition(body=_environment_crd())
        logger.info(f"Registered CRD {ENVIRONMENT_CRD_NAME}")
    except ApiException as e:
        if e.status != HTTP_CONFLICT:
            raise
        logger.debug(f"CRD {ENVIRONMENT_CRD_NAME} already registered")


def get_dev_environment(kube: KubeClient, namespace: str) -> Dict[str, Any]:
    try:
        return kube.custom_objects.get_namespaced_custom_object(
            group=ENVIRONMENT_CRD_GROUP,
            version=ENVIRONMENT_CRD_VERSION,
            namespace=namespace,
            plural=ENVIRONMENT_CRD_PLURAL,
            name=DEV_ENVIRONMENT_NAME,
        )
    except ApiException as e:
        if e.status == HTTP_NOT_FOUND:
            raise EnvironmentNotFoundError(DEV_ENVIRONMENT_NAME, namespace) from e
        raise


def modify_dev_environment(
    kube: KubeClient,
    namespace: str,
    callback: Callable[[Dict[str, Any]], Any],
    retries: int = 5
) -> Any:
    """
    Applies `callback` to the dev Environment and writes it back.

    Each attempt reads the latest version, lets the callback mutate it in
    place and replaces it; the resourceVersion read is sent back so a
    concurrent writer makes the API server answer 409 Conflict, in which
    case the whole read-modify-write is retried. Errors raised by the
    callback abort without writing.

    Returns:
        Whatever the callback returned on the attempt that was persisted.
    """
    for attempt in range(1, retries + 1):
        env = get_dev_environment(kube, namespace)
        result = callback(env)
        try:
            kube.custom_objects.replace_namespaced_custom_object(
                group=ENVIRONMENT_CRD_GROUP,
                version=ENVIRONMENT_CRD_VERSION,
                namespace=namespace,
                plural=ENVIRONMENT_CRD_PLURAL,
                name=DEV_ENVIRONMENT_NAME,
                body=env,
            )
            return result
        except ApiException as e:
            if e.status != HTTP_CONFLICT:
                raise
            logger.debug(f"Conflict updating Environment '{DEV_ENVIRONMENT_NAME}' (attempt {attempt}/{retries}), retrying")

    raise UpdateConflictError(
        f"Gave up updating Environment '{DEV_ENVIRONMENT_NAME}' in namespace '{namespace}' "
        f"after {retries} conflicting attempts"
    )

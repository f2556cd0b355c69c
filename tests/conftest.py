import copy

import pytest
from kubernetes.client.rest import ApiException

from teamctl.core.kube import KubeClient


def make_environment(locations, resource_version="1"):
    return {
        "apiVersion": "jenkins.io/v1",
        "kind": "Environment",
        "metadata": {"name": "dev", "namespace": "jx", "resourceVersion": resource_version},
        "spec": {
            "kind": "Development",
            "teamSettings": {
                "promotionEngine": "Jenkins",
                "quickstartLocations": [
                    {"gitUrl": url, "owner": owner, "gitKind": "github"} for url, owner in locations
                ],
            },
        },
    }


class FakeCustomObjects:
    """Stores one Environment and fails the first `conflicts` writes with 409."""

    def __init__(self, env=None, conflicts=0, replace_error=None):
        self.env = env
        self.conflicts = conflicts
        self.replace_error = replace_error
        self.gets = 0
        self.namespaces = []
        self.replaces = 0

    def get_namespaced_custom_object(self, group, version, namespace, plural, name):
        self.gets += 1
        self.namespaces.append(namespace)
        if self.env is None:
            raise ApiException(status=404, reason="Not Found")
        return copy.deepcopy(self.env)

    def replace_namespaced_custom_object(self, group, version, namespace, plural, name, body):
        self.replaces += 1
        if self.replace_error is not None:
            raise self.replace_error
        if self.conflicts:
            self.conflicts -= 1
            raise ApiException(status=409, reason="Conflict")
        self.env = copy.deepcopy(body)
        return body


class FakeApiExtensions:

    def __init__(self, error=None):
        self.error = error
        self.created = []

    def create_custom_resource_definition(self, body):
        if self.error is not None:
            raise self.error
        self.created.append(body)
        return body


@pytest.fixture
def locations():
    return [("https://github.com", "acme"), ("https://github.com", "beta")]


@pytest.fixture
def custom_objects(locations):
    return FakeCustomObjects(make_environment(locations))


@pytest.fixture
def kube(custom_objects):
    return KubeClient(custom_objects=custom_objects, apiextensions=FakeApiExtensions())


@pytest.fixture
def settings():
    return {"namespace": None, "context": None, "batch_mode": False, "update_retries": 5}


def stored_locations(custom_objects):
    return [
        (loc["gitUrl"], loc["owner"])
        for loc in custom_objects.env["spec"]["teamSettings"]["quickstartLocations"]
    ]

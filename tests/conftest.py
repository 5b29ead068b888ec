import base64
import json

import pytest
from kubernetes.client import ApiException

from podaccess.handlers.api_client import (
    KubeApiClient,
    namespaces_path,
    pod_path,
    pods_path,
    secret_path,
    service_account_path,
)

EXPORTER_TOKEN = "exporter-token"
NAMESPACE_LIST = {"kind": "NamespaceList", "apiVersion": "v1", "items": []}


class FakeResponse:
    def __init__(self, data: bytes):
        self.data = data
        self.status = 200


class FakeCluster:
    """
    Stands in for kubernetes.client.ApiClient. Routes are keyed by
    (method, path); an optional token restricts who may call the route.
    Unknown routes answer 404, wrong tokens 403.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.namespace_names = []
        self.pod_names = {}
        self.denied_tokens = set()
        self.add(namespaces_path(), self._namespace_list)

    def add(self, path, payload, method="GET", token=None):
        self.routes[(method, path)] = (payload, token)

    def call_api(self, resource_path, method, header_params=None, body=None, **kwargs):
        auth = (header_params or {}).get("Authorization")
        self.calls.append((method, resource_path, auth, body))
        if (method, resource_path) not in self.routes:
            raise ApiException(status=404, reason="Not Found")
        payload, token = self.routes[(method, resource_path)]
        if token is not None and auth != f"Bearer {token}":
            raise ApiException(status=403, reason="Forbidden")
        if callable(payload):
            payload = payload(auth)
        if isinstance(payload, Exception):
            raise payload
        if not isinstance(payload, (str, bytes)):
            payload = json.dumps(payload)
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return FakeResponse(payload)

    # --------- cluster builders ---------

    def _namespace_list(self, auth):
        if auth in {f"Bearer {t}" for t in self.denied_tokens}:
            return ApiException(status=403, reason="Forbidden")
        items = [{"metadata": {"name": n}} for n in self.namespace_names]
        return {**NAMESPACE_LIST, "items": items}

    def add_namespace(self, ns):
        self.namespace_names.append(ns)
        self.pod_names[ns] = []
        self.add(pods_path(ns), lambda auth: {
            "kind": "PodList",
            "items": [{"metadata": {"name": p}} for p in self.pod_names[ns]],
        })

    def add_pod(self, ns, pod, sa="default", secrets=None, token=None):
        """
        sa=None leaves spec.serviceAccountName out; secrets=None gives the
        service account no secret refs; token is the decoded bearer token
        stored in the first secret.
        """
        if ns not in self.pod_names:
            self.add_namespace(ns)
        self.pod_names[ns].append(pod)
        spec = {"serviceAccountName": sa} if sa else {}
        self.add(pod_path(ns, pod), {"kind": "Pod", "metadata": {"name": pod}, "spec": spec})
        if not sa:
            return
        sa_obj = {"kind": "ServiceAccount", "metadata": {"name": sa}}
        if secrets:
            sa_obj["secrets"] = [{"name": s} for s in secrets]
            if token is not None:
                encoded = base64.b64encode(token.encode("utf-8")).decode("ascii")
                self.add(secret_path(ns, secrets[0]), {"kind": "Secret", "data": {"token": encoded}})
        self.add(service_account_path(ns, sa), sa_obj)


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
def api(cluster):
    return KubeApiClient(cluster)


@pytest.fixture
def token_file(tmp_path):
    p = tmp_path / "token"
    p.write_text(EXPORTER_TOKEN + "\n", encoding="utf-8")
    return p

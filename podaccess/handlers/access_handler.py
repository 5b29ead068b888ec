# handlers/access_handler.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from podaccess.handlers.api_client import KubeApiClient, namespaces_path
from podaccess.handlers.result import Result

logger = logging.getLogger(__name__)

# marker of a namespace list payload; a substring check, not schema validation
NAMESPACE_LIST_KIND = "NamespaceList"


@dataclass(frozen=True)
class ProbeResult:
    namespace: str
    pod: str
    accessible: bool
    reason: Optional[str] = None

    @property
    def value(self) -> int:
        return 1 if self.accessible else 0


class AccessProber:
    """Canary call (list namespaces) with the pod's own token."""

    def __init__(self, api: KubeApiClient):
        self.api = api

    def probe(self, token: Result, namespace: str, pod: str) -> ProbeResult:
        if not token.ok:
            return ProbeResult(namespace, pod, False, token.error)
        res = self.api.request(namespaces_path(), token.value)
        if not res.ok:
            return ProbeResult(namespace, pod, False, res.error)
        if NAMESPACE_LIST_KIND not in res.value:
            return ProbeResult(namespace, pod, False, "unexpected canary payload")
        return ProbeResult(namespace, pod, True)

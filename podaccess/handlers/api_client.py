# handlers/api_client.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import urllib3
from kubernetes import client
from kubernetes.client import ApiException

from podaccess.handlers.result import Result, TRANSPORT, MISSING

logger = logging.getLogger(__name__)


class KubeApiClient:
    """
    Thin wrapper over kubernetes.client.ApiClient.call_api that returns the raw
    response body. One attempt per call; every transport problem comes back as a
    failed Result instead of an exception. Bodies and tokens are never logged.
    """

    def __init__(self, api_client: client.ApiClient):
        self.api_client = api_client

    def request(
        self,
        path: str,
        token: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Result:
        header_params = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if headers:
            header_params.update(headers)
        try:
            resp = self.api_client.call_api(
                path,
                method,
                header_params=header_params,
                body=body,
                auth_settings=[],
                _return_http_data_only=True,
                _preload_content=False,
            )
        except ApiException as e:
            logger.debug("[api] %s %s failed status=%s reason=%s", method, path, e.status, e.reason)
            return Result.failure(f"{method} {path}: {e.status} {e.reason}", TRANSPORT)
        except (urllib3.exceptions.HTTPError, ValueError, UnicodeError) as e:
            # ValueError/UnicodeError: http.client rejecting a header value
            logger.debug("[api] %s %s transport error=%s", method, path, type(e).__name__)
            return Result.failure(f"{method} {path}: {type(e).__name__}", TRANSPORT)
        data = getattr(resp, "data", resp)
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        return Result.success(data or "")

    def get_json(self, path: str, token: str) -> Result:
        return self.request(path, token).then(_decode_json)

    def post_json(self, path: str, token: str, body: Dict[str, Any]) -> Result:
        return self.request(path, token, method="POST", body=body).then(_decode_json)


def _decode_json(raw: str) -> Result:
    try:
        return Result.success(json.loads(raw))
    except ValueError:
        return Result.failure("response is not JSON", MISSING)


def dig(obj: Any, *keys) -> Any:
    """Walk dicts/lists like jq's .a.b[0].c; None on any miss."""
    cur = obj
    for key in keys:
        if isinstance(key, int):
            if not isinstance(cur, list) or len(cur) <= key:
                return None
            cur = cur[key]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(key)
        if cur is None:
            return None
    return cur


def item_names(payload: Any) -> list[str]:
    """`.items[].metadata.name` of a list response, skipping unnamed entries."""
    names = []
    for item in dig(payload, "items") or []:
        name = dig(item, "metadata", "name")
        if isinstance(name, str) and name:
            names.append(name)
    return names


# --------- Resource paths ---------

def _seg(value: str) -> str:
    return quote(value, safe="")

def namespaces_path() -> str:
    return "/api/v1/namespaces"

def pods_path(namespace: str) -> str:
    return f"/api/v1/namespaces/{_seg(namespace)}/pods"

def pod_path(namespace: str, pod: str) -> str:
    return f"/api/v1/namespaces/{_seg(namespace)}/pods/{_seg(pod)}"

def service_account_path(namespace: str, name: str) -> str:
    return f"/api/v1/namespaces/{_seg(namespace)}/serviceaccounts/{_seg(name)}"

def service_account_token_path(namespace: str, name: str) -> str:
    return service_account_path(namespace, name) + "/token"

def secret_path(namespace: str, name: str) -> str:
    return f"/api/v1/namespaces/{_seg(namespace)}/secrets/{_seg(name)}"

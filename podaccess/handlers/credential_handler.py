# handlers/credential_handler.py
from __future__ import annotations
import base64
import binascii
import logging

from podaccess.handlers.api_client import (
    KubeApiClient,
    dig,
    pod_path,
    secret_path,
    service_account_path,
    service_account_token_path,
)
from podaccess.config.app_config import DEFAULT_TOKEN_REQUEST_EXPIRATION_SECONDS
from podaccess.handlers.result import Result, MISSING

logger = logging.getLogger(__name__)

NO_SERVICE_ACCOUNT = "no service account"
NO_SECRET = "no secret"
NO_TOKEN = "no token"


class CredentialResolver:
    """
    pod -> serviceAccountName -> secrets[0].name -> data.token (base64) -> bearer token.

    All reads use the exporter's own token. Each stage returns a Result and the
    chain stops at the first failure; callers turn any failure into a 0 sample.
    """

    def __init__(
        self,
        api: KubeApiClient,
        token: str,
        token_request_fallback: bool = False,
        token_request_expiration_seconds: int = DEFAULT_TOKEN_REQUEST_EXPIRATION_SECONDS,
    ):
        self.api = api
        self.token = token
        self.token_request_fallback = token_request_fallback
        self.token_request_expiration_seconds = token_request_expiration_seconds

    def resolve(self, namespace: str, pod: str) -> Result:
        return (
            self._service_account_name(namespace, pod)
            .then(lambda sa_name: self._token_for(namespace, sa_name))
        )

    # --------- stages ---------

    def _service_account_name(self, namespace: str, pod: str) -> Result:
        def extract(obj):
            name = dig(obj, "spec", "serviceAccountName")
            if not isinstance(name, str) or not name:
                return Result.failure(NO_SERVICE_ACCOUNT, MISSING)
            return Result.success(name)

        return self.api.get_json(pod_path(namespace, pod), self.token).then(extract)

    def _token_for(self, namespace: str, sa_name: str) -> Result:
        sa = self.api.get_json(service_account_path(namespace, sa_name), self.token)
        if not sa.ok:
            return sa
        legacy = (
            _secret_name(sa.value)
            .then(lambda secret: self._secret_token(namespace, secret))
        )
        if not self.token_request_fallback:
            return legacy
        return legacy.or_else(lambda failed: self._request_token(namespace, sa_name, failed))

    def _secret_token(self, namespace: str, secret_name: str) -> Result:
        return (
            self.api.get_json(secret_path(namespace, secret_name), self.token)
            .then(_decode_token)
        )

    def _request_token(self, namespace: str, sa_name: str, failed: Result) -> Result:
        logger.debug("[resolve] ns=%s sa=%s legacy token unavailable (%s), trying TokenRequest",
                     namespace, sa_name, failed.error)
        body = {
            "apiVersion": "authentication.k8s.io/v1",
            "kind": "TokenRequest",
            "spec": {"expirationSeconds": self.token_request_expiration_seconds},
        }
        res = self.api.post_json(service_account_token_path(namespace, sa_name), self.token, body)
        if not res.ok:
            return res
        token = dig(res.value, "status", "token")
        if not isinstance(token, str) or not _header_safe(token):
            return Result.failure(NO_TOKEN, MISSING)
        return Result.success(token)


def _secret_name(sa_obj) -> Result:
    name = dig(sa_obj, "secrets", 0, "name")
    if not isinstance(name, str) or not name:
        return Result.failure(NO_SECRET, MISSING)
    return Result.success(name)


def _decode_token(secret_obj) -> Result:
    encoded = dig(secret_obj, "data", "token")
    if not isinstance(encoded, str) or not encoded:
        return Result.failure(NO_TOKEN, MISSING)
    try:
        token = base64.b64decode(encoded, validate=True).decode("utf-8").strip()
    except (binascii.Error, UnicodeDecodeError):
        return Result.failure(NO_TOKEN, MISSING)
    if not _header_safe(token):
        return Result.failure(NO_TOKEN, MISSING)
    return Result.success(token)


def _header_safe(token: str) -> bool:
    # must survive as an Authorization header value
    return bool(token) and token.isascii() and token.isprintable()

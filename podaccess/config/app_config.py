# app_config.py
from __future__ import annotations
import os
from dataclasses import dataclass

APP_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
APP_LOG_FORMAT = os.getenv("LOG_FORMAT", "json")  # "json" | "standard"

# --- Kubernetes API ---
KUBE_API_URL = os.getenv("KUBE_API_URL", "https://kubernetes.default.svc")
KUBE_VERIFY_SSL = os.getenv("KUBE_VERIFY_SSL", "false").lower() in ("1", "true", "yes")

# Mounted by the kubelet when running *inside* a pod
SA_TOKEN_PATH = os.getenv("SA_TOKEN_PATH", "/var/run/secrets/kubernetes.io/serviceaccount/token")
SA_CA_CERT_PATH = os.getenv("SA_CA_CERT_PATH", "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt")

# --- Output ---
METRICS_FILE = os.getenv("METRICS_FILE", "/tmp/metrics.log")

# --- Run gate ---
DEFAULT_RUN_BEFORE_MINUTE = 5
RUN_BEFORE_MINUTE = os.getenv("RUN_BEFORE_MINUTE", str(DEFAULT_RUN_BEFORE_MINUTE))

# --- TokenRequest fallback for service accounts without a legacy token secret ---
TOKEN_REQUEST_FALLBACK = os.getenv("TOKEN_REQUEST_FALLBACK", "false").lower() in ("1", "true", "yes")
DEFAULT_TOKEN_REQUEST_EXPIRATION_SECONDS = 600
TOKEN_REQUEST_EXPIRATION_SECONDS = os.getenv(
    "TOKEN_REQUEST_EXPIRATION_SECONDS", str(DEFAULT_TOKEN_REQUEST_EXPIRATION_SECONDS)
)


class SetupError(RuntimeError):
    """Fatal problem before any probe can run."""


def _as_int(name: str, raw) -> int:
    try:
        return int(str(raw).strip())
    except ValueError:
        raise SetupError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class ExporterConfig:
    api_url: str = KUBE_API_URL
    token_path: str = SA_TOKEN_PATH
    ca_cert_path: str = SA_CA_CERT_PATH
    verify_ssl: bool = KUBE_VERIFY_SSL
    metrics_file: str = METRICS_FILE
    run_before_minute: int = DEFAULT_RUN_BEFORE_MINUTE
    token_request_fallback: bool = TOKEN_REQUEST_FALLBACK
    token_request_expiration_seconds: int = DEFAULT_TOKEN_REQUEST_EXPIRATION_SECONDS

    @classmethod
    def from_env(cls) -> "ExporterConfig":
        # re-read the environment so a config built in tests sees monkeypatched values
        def flag(name, default):
            return os.getenv(name, default).lower() in ("1", "true", "yes")

        return cls(
            api_url=os.getenv("KUBE_API_URL", KUBE_API_URL).rstrip("/"),
            token_path=os.getenv("SA_TOKEN_PATH", SA_TOKEN_PATH),
            ca_cert_path=os.getenv("SA_CA_CERT_PATH", SA_CA_CERT_PATH),
            verify_ssl=flag("KUBE_VERIFY_SSL", "false"),
            metrics_file=os.getenv("METRICS_FILE", METRICS_FILE),
            run_before_minute=_as_int("RUN_BEFORE_MINUTE", os.getenv("RUN_BEFORE_MINUTE", RUN_BEFORE_MINUTE)),
            token_request_fallback=flag("TOKEN_REQUEST_FALLBACK", "false"),
            token_request_expiration_seconds=_as_int(
                "TOKEN_REQUEST_EXPIRATION_SECONDS",
                os.getenv("TOKEN_REQUEST_EXPIRATION_SECONDS", TOKEN_REQUEST_EXPIRATION_SECONDS),
            ),
        )

    def read_token(self) -> str:
        """Read the exporter's own bearer token; fail fast if it is not usable."""
        try:
            with open(self.token_path, "r", encoding="utf-8") as f:
                token = f.read().strip()
        except OSError as e:
            raise SetupError(f"Cannot read service account token at {self.token_path}: {e}")
        if not token:
            raise SetupError(f"Service account token at {self.token_path} is empty")
        return token

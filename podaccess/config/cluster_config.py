# cluster_config.py
from kubernetes import client as k8s_client

from podaccess.config.app_config import ExporterConfig


def build_configuration(cfg: ExporterConfig) -> k8s_client.Configuration:
    """
    Kubernetes client configuration for the in-cluster API server.

    No credentials are bound here; every request carries its own bearer
    token, so one client serves the exporter and every probed pod.
    """
    conf = k8s_client.Configuration()
    conf.host = cfg.api_url
    # exactly one attempt per request, no urllib3 retry loop
    conf.retries = False
    if cfg.verify_ssl:
        conf.verify_ssl = True
        conf.ssl_ca_cert = cfg.ca_cert_path
    else:
        conf.verify_ssl = False
    return conf


def build_api_client(cfg: ExporterConfig) -> k8s_client.ApiClient:
    return k8s_client.ApiClient(configuration=build_configuration(cfg))

# helpers/exposition.py
from datetime import datetime, timezone

ACCESS_METRIC = "k8s_pod_api_access"
ACCESS_HELP = "Whether a pod has access to the Kubernetes API."
HEARTBEAT_METRIC = "k8s_api_access_heartbeat"
RUN_HEARTBEAT_METRIC = "kubernetes_heart_beat"


def escape(value: str) -> str:
    """Label value escaping: backslash first, then quotes; newlines are dropped."""
    value = value.replace("\\", "\\\\")
    value = value.replace('"', '\\"')
    return value.replace("\n", "").replace("\r", "")


def render_access(result) -> str:
    return (
        f'{ACCESS_METRIC}{{namespace="{escape(result.namespace)}", '
        f'pod="{escape(result.pod)}"}} {result.value}'
    )


def render_heartbeat(epoch: int) -> str:
    return f"{HEARTBEAT_METRIC} {int(epoch)}"


def header_lines(now: datetime) -> list[str]:
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return [
        f"# scraping start {stamp}",
        f"{RUN_HEARTBEAT_METRIC} {int(now.timestamp())}",
        f"# HELP {ACCESS_METRIC} {ACCESS_HELP}",
        f"# TYPE {ACCESS_METRIC} gauge",
    ]

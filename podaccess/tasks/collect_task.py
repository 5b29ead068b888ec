# tasks/collect_task.py
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from podaccess.config.app_config import ExporterConfig, SetupError
from podaccess.config.cluster_config import build_api_client
from podaccess.config.logging_config import setup_logging
from podaccess.handlers.access_handler import AccessProber
from podaccess.handlers.api_client import KubeApiClient, item_names, namespaces_path, pods_path
from podaccess.handlers.credential_handler import CredentialResolver
from podaccess.handlers.result import Result
from podaccess.helpers.exposition import header_lines, render_access, render_heartbeat
from podaccess.metrics.ledger import MetricsLedger

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    namespaces: int = 0
    pods: int = 0
    accessible: int = 0
    denied: int = 0
    duplicates: int = 0
    elapsed: float = 0.0


def should_run(now: datetime, run_before_minute: int) -> bool:
    return now.minute < run_before_minute


class Collector:
    """Sequential sweep: every namespace, every pod, one probe at a time."""

    def __init__(
        self,
        api: KubeApiClient,
        token: str,
        resolver: CredentialResolver,
        prober: AccessProber,
        ledger: MetricsLedger,
        clock: Callable[[], float] = time.time,
    ):
        self.api = api
        self.token = token
        self.resolver = resolver
        self.prober = prober
        self.ledger = ledger
        self.clock = clock

    def _names(self, path: str) -> list[str]:
        res: Result = self.api.get_json(path, self.token)
        if not res.ok:
            logger.warning("[collect] enumeration failed path=%s error=%s", path, res.error)
            return []
        return item_names(res.value)

    def collect(self) -> RunSummary:
        started = self.clock()
        summary = RunSummary()
        for ns in self._names(namespaces_path()):
            summary.namespaces += 1
            for pod in self._names(pods_path(ns)):
                summary.pods += 1
                token = self.resolver.resolve(ns, pod)
                result = self.prober.probe(token, ns, pod)
                logger.debug("[collect] ns=%s pod=%s accessible=%s reason=%s",
                             ns, pod, result.accessible, result.reason)
                if result.accessible:
                    summary.accessible += 1
                else:
                    summary.denied += 1
                self.ledger.add(render_access(result))

        self.ledger.add(render_heartbeat(self.clock()))
        summary.duplicates = self.ledger.duplicates
        summary.elapsed = round(self.clock() - started, 3)
        return summary


def run(
    cfg: ExporterConfig,
    now: Optional[datetime] = None,
    api: Optional[KubeApiClient] = None,
    clock: Callable[[], float] = time.time,
) -> Optional[RunSummary]:
    """
    One gated collection cycle. Returns None when outside the run window
    (nothing is read or written). Raises SetupError when the exporter's own
    credential is unusable.
    """
    now = now or datetime.now().astimezone()
    if not should_run(now, cfg.run_before_minute):
        logger.info("[run] minute=%s not before %s, skipping", now.minute, cfg.run_before_minute)
        return None

    token = cfg.read_token()
    if api is None:
        api = KubeApiClient(build_api_client(cfg))

    try:
        ledger = MetricsLedger(cfg.metrics_file).truncate()
    except OSError as e:
        raise SetupError(f"Cannot truncate metrics file {cfg.metrics_file}: {e}")
    for line in header_lines(now):
        ledger.add(line)

    collector = Collector(
        api=api,
        token=token,
        resolver=CredentialResolver(
            api,
            token,
            token_request_fallback=cfg.token_request_fallback,
            token_request_expiration_seconds=cfg.token_request_expiration_seconds,
        ),
        prober=AccessProber(api),
        ledger=ledger,
        clock=clock,
    )
    summary = collector.collect()
    logger.info(
        "[run] namespaces=%d pods=%d accessible=%d denied=%d duplicates=%d elapsed=%.3fs file=%s",
        summary.namespaces, summary.pods, summary.accessible, summary.denied,
        summary.duplicates, summary.elapsed, cfg.metrics_file,
    )
    return summary


def main() -> int:
    setup_logging()
    try:
        cfg = ExporterConfig.from_env()
        run(cfg)
    except SetupError as e:
        logger.error("[run] setup failed: %s", e)
        return 1
    except OSError as e:
        logger.error("[run] metrics file write failed: %s", e)
        return 1
    return 0

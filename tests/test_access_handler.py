from podaccess.handlers.access_handler import AccessProber, ProbeResult
from podaccess.handlers.api_client import namespaces_path
from podaccess.handlers.result import Result


def test_unresolved_token_is_not_accessible(api, cluster):
    res = AccessProber(api).probe(Result.failure("no secret"), "default", "p1")
    assert res == ProbeResult("default", "p1", False, "no secret")
    assert res.value == 0
    assert cluster.calls == []


def test_namespace_list_means_accessible(api, cluster):
    res = AccessProber(api).probe(Result.success("pod-token"), "default", "p1")
    assert res.accessible and res.value == 1
    assert cluster.calls[-1][1:3] == (namespaces_path(), "Bearer pod-token")


def test_forbidden_canary(api, cluster):
    cluster.denied_tokens.add("pod-token")
    res = AccessProber(api).probe(Result.success("pod-token"), "default", "p1")
    assert not res.accessible
    assert "403" in res.reason


def test_unexpected_payload(api, cluster):
    cluster.add(namespaces_path(), {"kind": "Status", "status": "Success"})
    res = AccessProber(api).probe(Result.success("pod-token"), "default", "p1")
    assert not res.accessible

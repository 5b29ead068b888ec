# handlers/result.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Optional

TRANSPORT = "transport"   # the call itself failed (non-2xx, TLS, connect, timeout)
MISSING = "missing"       # the call worked but the field we need is absent/empty


@dataclass(frozen=True)
class Result:
    """Success-with-value or a typed failure. Failures short-circuit `then`."""
    value: Any = None
    error: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str, kind: str = MISSING) -> "Result":
        return cls(error=error, kind=kind)

    @property
    def ok(self) -> bool:
        return self.error is None

    def then(self, fn: Callable[[Any], "Result"]) -> "Result":
        if not self.ok:
            return self
        return fn(self.value)

    def or_else(self, fn: Callable[["Result"], "Result"]) -> "Result":
        if self.ok:
            return self
        return fn(self)

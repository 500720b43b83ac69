from __future__ import annotations
from typing import Protocol

from ..models import CycleResult


class Emitter(Protocol):
    """Hands one cycle result to whatever turns it into an execution.

    Returns an opaque execution handle.
    """

    def emit(self, watcher: str, kind: str, result: CycleResult) -> str: ...

# ytwatch/emitters/webhook.py
# POSTs the cycle payload as JSON to a workflow engine webhook.

from __future__ import annotations
import uuid
from typing import Callable, Optional

import requests

from ..errors import EmitError
from ..models import CycleResult
from ..utils.log import get_logger

logger = get_logger("ytwatch.emit")


class WebhookEmitter:
    def __init__(self, url: str, post: Callable[..., requests.Response] = requests.post, timeout: int = 20):
        self.url = url
        self.post = post
        self.timeout = timeout

    def emit(self, watcher: str, kind: str, result: CycleResult) -> str:
        body = {
            "watcher": watcher,
            "kind": kind,
            "trigger": result.to_payload(kind),
        }
        try:
            r = self.post(self.url, json=body, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise EmitError(f"webhook POST to {self.url} failed: {e}") from e

        handle = _execution_id(r) or f"webhook-{uuid.uuid4().hex[:12]}"
        logger.info("Emitted %d new %s for %s (execution %s)", result.count, kind, watcher, handle)
        return handle


def _execution_id(r: requests.Response) -> Optional[str]:
    try:
        data = r.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        return data.get("id") or data.get("executionId")
    return None

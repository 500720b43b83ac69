# ytwatch/emitters/log_emitter.py
# DRY_RUN emitter: logs the payload instead of sending it anywhere.

from __future__ import annotations
import json
import uuid

from ..models import CycleResult
from ..utils.log import get_logger

logger = get_logger("ytwatch.emit")


class LogEmitter:
    def emit(self, watcher: str, kind: str, result: CycleResult) -> str:
        handle = f"dry-run-{uuid.uuid4().hex[:12]}"
        payload = result.to_payload(kind)
        logger.info(
            "[DRY RUN] %s would emit %d new %s (%s):\n%s",
            watcher, result.count, kind, handle,
            json.dumps(payload, ensure_ascii=False, indent=2),
        )
        return handle

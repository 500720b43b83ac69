from __future__ import annotations
from typing import Optional

from .base import Emitter
from .log_emitter import LogEmitter
from .webhook import WebhookEmitter

__all__ = ["Emitter", "LogEmitter", "WebhookEmitter", "build_emitter"]


def build_emitter(dry_run: bool, webhook_url: Optional[str]) -> Emitter:
    """Webhook when configured and not a dry run; otherwise log only."""
    if webhook_url and not dry_run:
        return WebhookEmitter(webhook_url)
    return LogEmitter()

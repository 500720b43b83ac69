# ytwatch/config.py
# Runtime flags from the environment plus watcher definitions, either from a
# YAML file (YTWATCH_CONFIG) or from the YT_* quick-setup variables.

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError
from .net import DEFAULT_APPLICATION_NAME
from .utils.timeutil import parse_duration
from .youtube import COMMENT_MAX_RESULTS, COMMENT_ORDERS, VIDEO_MAX_RESULTS, check_max_results

LOG = logging.getLogger("ytwatch")

# --------------------------------------------------------------------
# Utility
# --------------------------------------------------------------------
def _bool(name: str, default: str = "false", env: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if env is None else env
    return str(env.get(name, default)).strip().lower() in ("1", "true", "yes", "on")


def _list(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [x.strip() for x in raw.split(",") if x.strip()]
    if isinstance(raw, (list, tuple)):
        return [str(x).strip() for x in raw if str(x).strip()]
    raise ConfigError(f"expected a list of strings, got {type(raw).__name__}")


# --------------------------------------------------------------------
# Watcher definitions
# --------------------------------------------------------------------
KINDS = ("comments", "videos")

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "comments": {"poll_interval": timedelta(minutes=30), "max_results": 20, "order": "time"},
    "videos": {"poll_interval": timedelta(hours=1), "max_results": 10, "order": None},
}


@dataclass(frozen=True)
class WatcherConfig:
    """One polling watcher.

    sources:
      - video ids for "comments", channel ids for "videos"; order matters,
        the first source with new items supplies the representative item
    """

    kind: str
    sources: Tuple[str, ...]
    poll_interval: timedelta
    max_results: int
    order: Optional[str] = None
    application_name: str = DEFAULT_APPLICATION_NAME
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or f"{self.kind}-watcher"

    def validate(self) -> "WatcherConfig":
        if self.kind not in KINDS:
            raise ConfigError(f"{self.label}: unknown kind {self.kind!r} (expected one of {KINDS})")
        if not self.sources or any(not s or not s.strip() for s in self.sources):
            raise ConfigError(f"{self.label}: sources must be a non-empty list of ids")
        if self.poll_interval <= timedelta(0):
            raise ConfigError(f"{self.label}: poll_interval must be positive, got {self.poll_interval}")
        bounds = COMMENT_MAX_RESULTS if self.kind == "comments" else VIDEO_MAX_RESULTS
        check_max_results(self.max_results, bounds, self.label)
        if self.kind == "comments" and self.order not in COMMENT_ORDERS:
            raise ConfigError(f"{self.label}: order must be one of {COMMENT_ORDERS}, got {self.order!r}")
        return self


def _int(raw: Any, where: str) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"{where}: expected an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{where}: expected an integer, got {raw!r}") from e


def _duration(raw: Any, where: str) -> timedelta:
    try:
        return parse_duration(raw)
    except ValueError as e:
        raise ConfigError(f"{where}: {e}") from e


def watcher_from_dict(d: Mapping[str, Any], default_app_name: str = DEFAULT_APPLICATION_NAME) -> WatcherConfig:
    kind = str(d.get("kind") or "").strip().lower()
    if kind not in KINDS:
        raise ConfigError(f"watcher {d.get('name') or '?'}: unknown kind {kind!r} (expected one of {KINDS})")
    defaults = DEFAULTS[kind]
    name = str(d.get("name") or "")
    where = name or kind

    interval = d.get("poll_interval", d.get("interval"))
    max_results = d.get("max_results")
    order = d.get("order", defaults["order"]) if kind == "comments" else None

    return WatcherConfig(
        kind=kind,
        sources=tuple(_list(d.get("sources"))),
        poll_interval=defaults["poll_interval"] if interval is None else _duration(interval, where),
        max_results=defaults["max_results"] if max_results is None else _int(max_results, where),
        order=str(order).strip().lower() if order is not None else None,
        application_name=str(d.get("application_name") or default_app_name),
        name=name,
    )


def _load_yaml(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read watcher config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(y, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    watchers = y.get("watchers") or []
    if not isinstance(watchers, list) or not all(isinstance(w, dict) for w in watchers):
        raise ConfigError(f"{path}: 'watchers' must be a list of mappings")
    return watchers


def _watchers_from_env(env: Mapping[str, str]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    video_ids = _list(env.get("YT_VIDEO_IDS"))
    if video_ids:
        out.append({
            "name": "comments",
            "kind": "comments",
            "sources": video_ids,
            "poll_interval": env.get("YT_COMMENT_INTERVAL"),
            "max_results": env.get("YT_COMMENT_MAX_RESULTS"),
            "order": env.get("YT_COMMENT_ORDER") or None,
        })
    channel_ids = _list(env.get("YT_CHANNEL_IDS"))
    if channel_ids:
        out.append({
            "name": "videos",
            "kind": "videos",
            "sources": channel_ids,
            "poll_interval": env.get("YT_VIDEO_INTERVAL"),
            "max_results": env.get("YT_VIDEO_MAX_RESULTS"),
        })
    return out


def unique_labels(watchers: List[WatcherConfig]) -> List[WatcherConfig]:
    """Suffix unnamed watchers that share a label; explicit duplicate names are an error."""
    out: List[WatcherConfig] = []
    seen: Dict[str, int] = {}
    for w in watchers:
        label = w.label
        if label in seen:
            if w.name:
                raise ConfigError(f"duplicate watcher name {label!r}")
            seen[label] += 1
            while f"{label}-{seen[label]}" in seen:
                seen[label] += 1
            w = replace(w, name=f"{label}-{seen[label]}")
        seen.setdefault(w.label, 1)
        out.append(w)
    return out


def load_watchers_config(env: Optional[Mapping[str, str]] = None) -> List[WatcherConfig]:
    """YAML file first (YTWATCH_CONFIG), then the YT_* variables."""
    env = os.environ if env is None else env
    app_name = env.get("YT_APPLICATION_NAME") or DEFAULT_APPLICATION_NAME

    raw: List[Dict[str, Any]] = []
    path = env.get("YTWATCH_CONFIG")
    if path:
        raw.extend(_load_yaml(path))
    raw.extend(_watchers_from_env(env))

    # None means "use the default" for env-sourced keys
    cleaned = [{k: v for k, v in w.items() if v is not None} for w in raw]
    watchers = unique_labels([watcher_from_dict(w, default_app_name=app_name) for w in cleaned])
    if not watchers:
        LOG.warning("No watchers configured. Set YTWATCH_CONFIG, YT_VIDEO_IDS or YT_CHANNEL_IDS.")
    return watchers


# --------------------------------------------------------------------
# Runtime flags
# --------------------------------------------------------------------
@dataclass(frozen=True)
class RuntimeConfig:
    dry_run: bool
    loop: bool
    webhook_url: Optional[str]
    next_run_at: Optional[str]
    access_token: Optional[str]
    client_id: Optional[str]
    client_secret: Optional[str]
    refresh_token: Optional[str]
    token_url: Optional[str]
    max_workers: int


def load_runtime_config(env: Optional[Mapping[str, str]] = None) -> RuntimeConfig:
    env = os.environ if env is None else env
    return RuntimeConfig(
        dry_run=_bool("DRY_RUN", "false", env),
        loop=_bool("LOOP", "false", env),
        webhook_url=(env.get("EMIT_WEBHOOK_URL") or "").strip() or None,
        next_run_at=(env.get("NEXT_RUN_AT") or "").strip() or None,
        access_token=(env.get("YOUTUBE_ACCESS_TOKEN") or "").strip() or None,
        client_id=(env.get("YOUTUBE_CLIENT_ID") or "").strip() or None,
        client_secret=(env.get("YOUTUBE_CLIENT_SECRET") or "").strip() or None,
        refresh_token=(env.get("YOUTUBE_REFRESH_TOKEN") or "").strip() or None,
        token_url=(env.get("YOUTUBE_TOKEN_URL") or "").strip() or None,
        max_workers=_int(env.get("MAX_WORKERS", "8"), "MAX_WORKERS"),
    )

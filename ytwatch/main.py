# ytwatch/main.py
# Entry point: build watchers from config -> run one cycle each (or keep
# scheduling them when LOOP=true) -> hand new items to the emitter.

from __future__ import annotations
import time
from datetime import datetime
from typing import Dict, List, Optional

from .auth import GOOGLE_TOKEN_URL, refresh_access_token
from .config import RuntimeConfig, WatcherConfig, load_runtime_config, load_watchers_config, unique_labels
from .emitters import Emitter, build_emitter
from .errors import ConfigError, CycleCancelled, YtWatchError
from .models import CycleResult
from .utils.log import get_logger
from .utils.timeutil import parse_instant, utc_now
from .watchers import WATCHERS, Watcher
from .youtube import YouTubeClient

logger = get_logger("ytwatch")
DIV = "-" * 72


def _access_token(rt: RuntimeConfig) -> str:
    if rt.access_token:
        return rt.access_token
    if rt.client_id and rt.client_secret and rt.refresh_token:
        token = refresh_access_token(
            rt.client_id,
            rt.client_secret,
            rt.refresh_token,
            token_url=rt.token_url or GOOGLE_TOKEN_URL,
        )
        logger.info("Obtained access token (expires at %s)", token.expires_at)
        return token.access_token
    raise ConfigError(
        "No credentials: set YOUTUBE_ACCESS_TOKEN, or YOUTUBE_CLIENT_ID, "
        "YOUTUBE_CLIENT_SECRET and YOUTUBE_REFRESH_TOKEN."
    )


def build_watchers(
    configs: List[WatcherConfig],
    clients: Dict[str, YouTubeClient],
    emitter: Emitter,
    max_workers: int = 8,
) -> List[Watcher]:
    """`clients` maps application name -> client so watchers sharing one share a session."""
    return [
        WATCHERS[cfg.kind](cfg, clients[cfg.application_name], emitter, max_workers=max_workers)
        for cfg in unique_labels(configs)
    ]


def run_cycle(watchers: List[Watcher], next_run_at: Optional[datetime] = None) -> Dict[str, Optional[CycleResult]]:
    """Evaluate every watcher once. A failing watcher never stops the others."""
    results: Dict[str, Optional[CycleResult]] = {}
    for w in watchers:
        logger.info(DIV)
        logger.info("Checking %s", w.name)
        try:
            results[w.name] = w.evaluate(next_run_at)
        except CycleCancelled:
            logger.warning("%s: cycle cancelled; nothing emitted", w.name)
            results[w.name] = None
        except ConfigError as e:
            logger.error("%s: configuration error: %s", w.name, e)
            results[w.name] = None
        except YtWatchError:
            # Already logged with traceback at the watcher boundary
            results[w.name] = None
    return results


def run_forever(watchers: List[Watcher], sleep=time.sleep, clock=utc_now) -> None:
    """Tiny scheduler: each watcher runs every poll_interval, window anchored on its due time."""
    if not watchers:
        return
    start = clock()
    # Keyed by position: two watchers may share a label
    due = [start for _ in watchers]
    try:
        while True:
            i = min(range(len(due)), key=due.__getitem__)
            wait = (due[i] - clock()).total_seconds()
            if wait > 0:
                sleep(wait)
            run_cycle([watchers[i]], next_run_at=due[i])
            due[i] = due[i] + watchers[i].config.poll_interval
    except KeyboardInterrupt:
        logger.info("Interrupted; cancelling watchers.")
        for w in watchers:
            w.cancel()


def main() -> int:
    try:
        rt = load_runtime_config()
        configs = load_watchers_config()
        if not configs:
            return 0
        token = _access_token(rt)
    except YtWatchError as e:
        logger.error("Startup failed: %s", e)
        return 2

    app_names = {cfg.application_name for cfg in configs}
    clients = {name: YouTubeClient.from_token(token, name) for name in app_names}
    emitter = build_emitter(rt.dry_run, rt.webhook_url)
    watchers = build_watchers(configs, clients, emitter, max_workers=rt.max_workers)

    if rt.loop:
        run_forever(watchers)
        return 0

    next_run_at = parse_instant(rt.next_run_at) if rt.next_run_at else None
    if rt.next_run_at and next_run_at is None:
        logger.warning("Ignoring unparseable NEXT_RUN_AT=%r", rt.next_run_at)
    run_cycle(watchers, next_run_at=next_run_at)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

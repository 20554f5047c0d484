#!/usr/bin/env python3
"""nginx status monitor — polls stub_status pages and prints JSON lines.

Usage:
    python monitor.py                    # use default config/sources.yaml
    python monitor.py -c myconfig.yaml   # use custom config
    python monitor.py --once             # one tick per source, then exit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
import threading
from pathlib import Path
from typing import Any

import yaml

from collectors import ConfigError, Sink, create_input
from sinks import JsonLinesSink

logger = logging.getLogger("monitor")

DEFAULT_TYPE = "nginx_status"


def load_config(path: Path) -> list[dict[str, Any]]:
    """Parse sources.yaml and return the raw per-source mappings."""
    with open(path) as f:
        config = yaml.safe_load(f) or {}

    sources = config.get("sources", [])
    if not isinstance(sources, list):
        raise ConfigError(f"{path}: 'sources' must be a list")
    for i, src in enumerate(sources):
        if not isinstance(src, dict):
            raise ConfigError(f"{path}: source #{i} must be a mapping")
    return sources


def build_inputs(sources: list[dict[str, Any]], sink: Sink, **plugin_kwargs: Any) -> list[Any]:
    """Create and configure one input per source entry."""
    inputs = []
    for src in sources:
        raw = dict(src)
        stype = raw.pop("type", DEFAULT_TYPE)
        plugin = create_input(stype, sink=sink, **plugin_kwargs)
        plugin.configure(raw)
        inputs.append(plugin)
    return inputs


def run_once(inputs: list[Any]) -> int:
    """Run a single tick for every input on the calling thread."""

    async def _all() -> int:
        emitted = 0
        for plugin in inputs:
            emitted += await plugin.tick()
        return emitted

    return asyncio.run(_all())


def report_dead_inputs(inputs: list[Any], reported: set[int]) -> list[Any]:
    """Log each input whose poll thread has died, once; returns the newly dead ones."""
    dead = [p for p in inputs if not p.running and id(p) not in reported]
    for plugin in dead:
        reported.add(id(plugin))
        logger.error("poll thread for %s is no longer running", plugin.config.url)
    return dead


def run_forever(inputs: list[Any]) -> None:
    """Start every input and block until SIGINT/SIGTERM, then shut them down."""
    stop = threading.Event()

    def _on_signal(signum, _frame) -> None:
        logger.info("Received signal %s, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    started = []
    try:
        for plugin in inputs:
            plugin.start()
            started.append(plugin)
        reported: set[int] = set()
        while not stop.wait(1.0):
            report_dead_inputs(started, reported)
    finally:
        for plugin in started:
            plugin.shutdown()


def main() -> None:
    parser = argparse.ArgumentParser(description="nginx stub_status monitor")
    parser.add_argument(
        "-c", "--config",
        default=str(Path(__file__).parent / "config" / "sources.yaml"),
        help="Path to sources.yaml config file",
    )
    parser.add_argument("--once", action="store_true", help="poll every source once and exit")
    parser.add_argument(
        "--log-level",
        default=os.getenv("NGINX_STATUS_LOG_LEVEL", "INFO"),
        help="Logging level (default: $NGINX_STATUS_LOG_LEVEL or INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s  %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        inputs = build_inputs(load_config(config_path), JsonLinesSink())
    except ConfigError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        sys.exit(1)

    if not inputs:
        print("No sources configured. Edit config/sources.yaml", file=sys.stderr)
        sys.exit(1)

    if args.once:
        run_once(inputs)
        return
    run_forever(inputs)


if __name__ == "__main__":
    main()

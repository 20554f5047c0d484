#!/usr/bin/env python3
"""nginx status monitor — web host exposing the latest counters as JSON.

Usage:
    python web.py                              # default config, port 9860
    python web.py -c myconfig.yaml --port 8080 # custom config and port
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from collectors import ConfigError
from monitor import build_inputs, load_config
from sinks import SnapshotSink

logger = logging.getLogger("web")


# ---------------------------------------------------------------------------
# App factory: inputs feed a SnapshotSink, lifespan owns start/shutdown
# ---------------------------------------------------------------------------

def create_app(
    sources: list[dict[str, Any]],
    sink: SnapshotSink | None = None,
    **plugin_kwargs: Any,
) -> FastAPI:
    sink = sink or SnapshotSink()
    inputs = build_inputs(sources, sink, **plugin_kwargs)
    started_at = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the inputs on startup, shut them down (joining their threads) on exit."""
        started = []
        try:
            for plugin in inputs:
                plugin.start()
                started.append(plugin)
            yield
        finally:
            for plugin in started:
                plugin.shutdown()

    app = FastAPI(title="nginx status monitor", lifespan=lifespan)
    app.state.sink = sink
    app.state.inputs = inputs

    @app.get("/api/status")
    async def api_status():
        """Latest counters per (tag, server) plus per-input tick stats."""
        return JSONResponse({
            "servers": sink.snapshot(),
            "inputs": [
                {
                    "tag": p.config.tag,
                    "url": p.config.url,
                    "interval": p.config.interval,
                    "running": p.running,
                    "stats": p.stats.snapshot(),
                }
                for p in inputs
            ],
            "timestamp": time.time(),
        })

    @app.get("/metrics")
    async def metrics():
        """Self-monitoring counters for the collector itself."""
        stats = [p.stats for p in inputs]
        return JSONResponse({
            "inputs": len(inputs),
            "inputs_running": sum(1 for p in inputs if p.running),
            "ticks": sum(s.ticks for s in stats),
            "fetch_failures": sum(s.fetch_failures for s in stats),
            "parse_failures": sum(s.parse_failures for s in stats),
            "errors": sum(s.errors for s in stats),
            "records_emitted": sum(s.records_emitted for s in stats),
            "records_received": sink.records_received,
            "uptime": int(time.time() - started_at),
        })

    return app


# ---------------------------------------------------------------------------
# CLI entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="nginx status monitor — web host")
    parser.add_argument(
        "-c", "--config",
        default=str(Path(__file__).parent / "config" / "sources.yaml"),
        help="Path to sources.yaml config file",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=9860, help="Port (default: 9860)")
    parser.add_argument(
        "--log-level",
        default=os.getenv("NGINX_STATUS_LOG_LEVEL", "INFO"),
        help="Logging level (default: $NGINX_STATUS_LOG_LEVEL or INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s  %(levelname)s %(name)s %(message)s",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config file not found: {config_path}")
        sys.exit(1)

    try:
        sources = load_config(config_path)
        app = create_app(sources)
    except ConfigError as e:
        print(f"Invalid config: {e}")
        sys.exit(1)

    if not app.state.inputs:
        print("No sources configured. Edit config/sources.yaml")
        sys.exit(1)

    logger.info("Starting web host on http://%s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()

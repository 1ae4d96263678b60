from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .app import create_app


try:
    import uvicorn
except ModuleNotFoundError as exc:  # pragma: no cover - import failure path
    uvicorn = None
    _IMPORT_ERROR = exc
else:
    _IMPORT_ERROR = None

logger = logging.getLogger(__name__)

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the TinyBFC compile API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument(
        "--log-level",
        default="info",
        type=str.lower,
        choices=LOG_LEVELS,
        help="Logging level (default: info)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if uvicorn is None:
        message = "uvicorn is required to run the TinyBFC API server"
        if _IMPORT_ERROR is not None:
            message = f"{message}: {_IMPORT_ERROR}"
        print(message, file=sys.stderr)
        return 1

    logger.info("serving on %s:%d", args.host, args.port)
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

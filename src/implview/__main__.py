from __future__ import annotations

import argparse
import logging
import os

from .runtime.server import run


def main() -> None:
    p = argparse.ArgumentParser(prog="implview", description="implview: serve trait implementor tables")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--docs-root", default=os.getenv("IMPLVIEW_DOCS_ROOT"), help="generated documentation site to serve")
    p.add_argument("--implementors-root", default=None, help="defaults to <docs-root>/implementors")
    p.add_argument("--log-level", default="info")
    p.add_argument("--no-browser", action="store_true")
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s:     %(name)s - %(message)s")

    srv = run(
        host=args.host,
        port=args.port,
        docs_root=args.docs_root,
        implementors_root=args.implementors_root,
        open_browser=not args.no_browser,
        log_level=args.log_level,
    )
    print(srv.url if hasattr(srv, "url") else srv.base_url)

    # Block forever (so it behaves like a normal CLI server)
    import time

    while True:
        time.sleep(3600)


if __name__ == "__main__":
    main()

import argparse
import asyncio
import logging
import os

from .server import HostServer


def main() -> None:
    parser = argparse.ArgumentParser(description="LIT card game server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "3002")))
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (DEBUG also logs every applied action)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level))

    server = HostServer()
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()

"""Protean Engine runner for the campus domain.

Starts the Engine that processes events asynchronously, so the notification
fan-out runs after the mutation that triggered it has committed:
- OutboxProcessor: publishes committed domain events
- StreamSubscriptions: invokes the event lifecycle dispatcher

Usage:
    python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine

from campus.domain import campus
from campus.utils.logging import configure_logging


async def run():
    campus.init()
    engine = Engine(campus)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Campus Engine runner")
    parser.add_argument("--log-level", help="Override the environment's log level")
    args = parser.parse_args()

    configure_logging(level=args.log_level)
    asyncio.run(run())


if __name__ == "__main__":
    main()

"""Minimal example sending log records to a Graylog GELF UDP input."""

from __future__ import annotations

import time

import gelfudp


def main() -> None:
    gelfudp.configure(
        {
            "transport": {"host": "127.0.0.1", "port": 12201, "compression": "gzip"},
            "handler": {"level": "INFO", "static_fields": {"app": "gelfudp-demo"}},
            "logging": {"root": {"level": "INFO"}},
        }
    )

    logger = gelfudp.get_context_logger("examples.orders", env="dev")
    for order_id in range(1, 4):
        logger.info("processed order", extra={"order_id": order_id, "total": order_id * 19.99})
        time.sleep(0.1)

    gelfudp.write(b'{"version":"1.1","host":"example","short_message":"raw payload"}')


if __name__ == "__main__":
    main()

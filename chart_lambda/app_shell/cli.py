"""
Local invocation CLI.

    python -m chart_lambda.app_shell.cli sample > request.json
    python -m chart_lambda.app_shell.cli invoke request.json --local-dir ./storage
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from chart_lambda.adapters.local_storage import create_local_storage
from chart_lambda.app_shell.config import HandlerSettings, configure_logging
from chart_lambda.app_shell.context import create_handler

logger = logging.getLogger("cli")

SAMPLE_REQUEST: dict[str, Any] = {
    "chartSpec": {
        "type": "line",
        "data": {
            "labels": ["A", "B", "C", "D", "E"],
            "datasets": [
                {
                    "label": "Product Demand",
                    "data": [12, 18, 16, 23, 18],
                    "backgroundColor": "tomato",
                    "pointRadius": 0,
                }
            ],
        },
        "options": {},
    },
    "s3Prefix": "mycharts/image-",
    "chartWidth": 480,
    "chartHeight": 320,
    "expireTime": 604800,
    "fileFormat": "jpg",
}


def handle_sample(args: argparse.Namespace) -> int:
    print(json.dumps(SAMPLE_REQUEST, indent=2))
    return 0


def handle_invoke(args: argparse.Namespace) -> int:
    payload_path = Path(args.payload)
    if not payload_path.exists():
        logger.error(f"Payload file {payload_path} not found.")
        return 1

    with open(payload_path) as f:
        event = json.load(f)

    settings = HandlerSettings.from_env()
    if args.bucket:
        settings = settings.model_copy(update={"s3_bucket": args.bucket})
    configure_logging(settings)

    storage = create_local_storage(args.local_dir) if args.local_dir else None
    handler = create_handler(settings, storage=storage)

    result = handler.invoke(event)
    if result.error is not None:
        print(result.error, file=sys.stderr)
        return 1

    print(result.url)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Chart Lambda CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # invoke
    invoke_parser = subparsers.add_parser("invoke", help="Run one chart invocation")
    invoke_parser.add_argument("payload", help="Path to a JSON request payload")
    invoke_parser.add_argument(
        "--local-dir", help="Store charts under this directory instead of S3"
    )
    invoke_parser.add_argument("--bucket", help="Override the S3_BUCKET environment variable")

    # sample
    subparsers.add_parser("sample", help="Print an example request payload")

    args = parser.parse_args(argv)

    if args.command == "invoke":
        return handle_invoke(args)
    if args.command == "sample":
        return handle_sample(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
COAR Notify CLI

  coarnotify validate - Check a notification document
  coarnotify send     - Send a notification to an inbox
  coarnotify inbox    - Run a local inbox
  coarnotify patterns - List the known patterns

Usage:
  coarnotify validate <file.json|file.yaml>
  coarnotify send <file> [--inbox <url>] [--no-validate]
  coarnotify inbox [--host <host>] [--port <port>] [--store-dir <dir>] [--accepted] [--no-validate]
  coarnotify patterns

Notification documents may be JSON or YAML (by file extension).
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from . import factory
from .client import COARNotifyClient
from .exceptions import NotifyException, ValidationError
from .inbox import RESPONSE_ACCEPTED, RESPONSE_CREATED, InboxServer

INBOX_URL_ENV = "COARNOTIFY_INBOX_URL"


def load_document(path: Path | str) -> Dict[str, Any]:
    """Load a notification document from a JSON or YAML file."""
    path = Path(path)
    with open(path, "r") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return data


def cmd_validate(args) -> int:
    """Validate a notification document."""
    try:
        notification = factory.get_by_object(load_document(args.file), validate_stream_on_construct=False)
    except (NotifyException, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        notification.validate()
    except ValidationError as ve:
        print(f"INVALID {type(notification).__name__} {notification.id}")
        print(json.dumps(ve.to_dict(), indent=2))
        return 1

    print(f"OK {type(notification).__name__} {notification.id}")
    return 0


def cmd_send(args) -> int:
    """Send a notification document to an inbox."""
    try:
        notification = factory.get_by_object(load_document(args.file), validate_stream_on_construct=False)
    except (NotifyException, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    client = COARNotifyClient(inbox_url=args.inbox or os.environ.get(INBOX_URL_ENV))
    try:
        response = client.send(notification, validate=not args.no_validate)
    except (NotifyException, ConnectionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Sent {type(notification).__name__} {notification.id}: {response.action}")
    if response.location:
        print(f"Location: {response.location}")
    return 0


def cmd_inbox(args) -> int:
    """Run a local inbox until interrupted."""
    inbox = InboxServer(
        store_dir=args.store_dir,
        host=args.host,
        port=args.port,
        response=RESPONSE_ACCEPTED if args.accepted else RESPONSE_CREATED,
        validate=not args.no_validate,
    )
    inbox.start()
    return 0


def cmd_patterns(args) -> int:
    """List registered patterns and the types that identify them."""
    for name, cls in factory.list_patterns().items():
        types = cls.TYPE if isinstance(cls.TYPE, list) else [cls.TYPE]
        print(f"{name}: {', '.join(types)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="coarnotify",
        description="COAR Notify - validate, send and receive notifications",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a notification document")
    validate_parser.add_argument("file", help="Notification JSON or YAML file")

    # send command
    send_parser = subparsers.add_parser("send", help="Send a notification to an inbox")
    send_parser.add_argument("file", help="Notification JSON or YAML file")
    send_parser.add_argument("--inbox",
                             help=f"Inbox URL (default: ${INBOX_URL_ENV}, then the notification's target inbox)")
    send_parser.add_argument("--no-validate", action="store_true",
                             help="Send without validating first")

    # inbox command
    inbox_parser = subparsers.add_parser("inbox", help="Run a local inbox")
    inbox_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    inbox_parser.add_argument("--port", type=int, default=8080, help="Port to bind to")
    inbox_parser.add_argument("--store-dir", default="./coar_inbox", help="Directory to store notifications in")
    inbox_parser.add_argument("--accepted", action="store_true",
                              help="Answer 202 Accepted instead of 201 Created")
    inbox_parser.add_argument("--no-validate", action="store_true",
                              help="Accept notifications that fail validation")

    # patterns command
    subparsers.add_parser("patterns", help="List the known patterns")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "validate":
        return cmd_validate(args)
    elif args.command == "send":
        return cmd_send(args)
    elif args.command == "inbox":
        return cmd_inbox(args)
    elif args.command == "patterns":
        return cmd_patterns(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

# coarnotify/inbox.py
"""
A small stand-alone COAR Notify inbox.

Receives notifications over HTTP, checks them with COARNotifyServer and
keeps them as JSON files on disk. Useful for trying out a client, and for
end-to-end tests.

Endpoints:
    POST /inbox                - Receive a notification
    GET  /notifications/:id    - Get a stored notification
    GET  /health               - Health check
"""

import json
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .core.notify import NotifyPattern
from .exceptions import NotifyException
from .server import (
    COARNotifyReceipt,
    COARNotifyServer,
    COARNotifyServerError,
    COARNotifyServiceBinding,
)

logger = logging.getLogger(__name__)

RESPONSE_CREATED = "created"
RESPONSE_ACCEPTED = "accepted"


@dataclass
class StoredNotification:
    """A notification as kept by the inbox."""
    key: str                  # Local identifier, used in the notification's URL
    notification_id: str      # The notification's own id
    pattern: str              # Name of the pattern class it resolved to
    received_at: float
    document: Dict[str, Any]  # The JSON-LD document

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "notification_id": self.notification_id,
            "pattern": self.pattern,
            "received_at": self.received_at,
            "document": self.document,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredNotification":
        return cls(
            key=data["key"],
            notification_id=data["notification_id"],
            pattern=data["pattern"],
            received_at=data["received_at"],
            document=data["document"],
        )


class InboxStore:
    """
    Notifications stored one JSON file per notification.

    Files already in ``store_dir`` are loaded on construction.
    """

    def __init__(self, store_dir: Path | str):
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)
        self._notifications: Dict[str, StoredNotification] = {}
        self._lock = threading.Lock()
        self._load()

    def _path(self, key: str) -> Path:
        return self.store_dir / f"{key}.json"

    def _load(self):
        """Load stored notifications from disk."""
        for path in sorted(self.store_dir.glob("*.json")):
            try:
                with open(path) as f:
                    stored = StoredNotification.from_dict(json.load(f))
                self._notifications[stored.key] = stored
            except (json.JSONDecodeError, KeyError) as e:
                logger.warning(f"Failed to load {path.name}: {e}")

    def add(self, notification: NotifyPattern) -> StoredNotification:
        """Store a notification, returning its stored record."""
        stored = StoredNotification(
            key=uuid.uuid4().hex,
            notification_id=notification.id,
            pattern=type(notification).__name__,
            received_at=time.time(),
            document=notification.to_jsonld(),
        )
        with self._lock:
            with open(self._path(stored.key), "w") as f:
                json.dump(stored.to_dict(), f, indent=2)
            self._notifications[stored.key] = stored
        logger.info(f"Stored {stored.pattern} {stored.notification_id} as {stored.key}")
        return stored

    def get(self, key: str) -> Optional[StoredNotification]:
        """Get a stored notification by its key."""
        with self._lock:
            return self._notifications.get(key)

    def list(self) -> List[StoredNotification]:
        """List stored notifications, oldest first."""
        with self._lock:
            return sorted(self._notifications.values(), key=lambda s: s.received_at)

    def __len__(self) -> int:
        return len(self._notifications)


class StoreServiceBinding(COARNotifyServiceBinding):
    """
    Service binding that keeps every notification in an InboxStore.

    Args:
        store: Where to keep notifications
        base_url: URL the inbox is served from, used for Location headers
        response: RESPONSE_CREATED to answer 201 with a Location, or
            RESPONSE_ACCEPTED to answer 202
    """

    def __init__(self, store: InboxStore, base_url: str, response: str = RESPONSE_CREATED):
        if response not in (RESPONSE_CREATED, RESPONSE_ACCEPTED):
            raise ValueError(f"Unknown response mode: {response}")
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.response = response

    def notification_received(self, notification: NotifyPattern) -> COARNotifyReceipt:
        stored = self.store.add(notification)
        if self.response == RESPONSE_ACCEPTED:
            return COARNotifyReceipt(COARNotifyReceipt.ACCEPTED)
        return COARNotifyReceipt(
            COARNotifyReceipt.CREATED,
            f"{self.base_url}/notifications/{stored.key}",
        )


class InboxServer:
    """
    HTTP inbox.

    Usage:
        inbox = InboxServer(store_dir="/tmp/coar_inbox", port=8080)
        inbox.start()  # Blocking

    Args:
        store_dir: Directory for the InboxStore
        host: Host to bind to
        port: Port to bind to; 0 picks a free one
        response: RESPONSE_CREATED or RESPONSE_ACCEPTED
        validate: Refuse notifications that fail validation
    """

    def __init__(
        self,
        store_dir: Path | str,
        host: str = "127.0.0.1",
        port: int = 8080,
        response: str = RESPONSE_CREATED,
        validate: bool = True,
    ):
        self.host = host
        self.port = port
        self.validate = validate
        self.store = InboxStore(store_dir)
        self.binding = StoreServiceBinding(self.store, f"http://{host}:{port}", response)
        self.server = COARNotifyServer(self.binding)
        self.httpd: Optional[HTTPServer] = None

    @property
    def base_url(self) -> str:
        return self.binding.base_url

    @property
    def inbox_url(self) -> str:
        return f"{self.base_url}/inbox"

    def _create_handler(server_instance):
        """Create request handler with access to the inbox."""

        class RequestHandler(BaseHTTPRequestHandler):
            server_ref = server_instance

            def log_message(self, format, *args):
                logger.debug(format % args)

            def _send_json(self, data: Any, status: int = 200, headers: Optional[Dict[str, str]] = None):
                body = json.dumps(data).encode()
                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                for name, value in (headers or {}).items():
                    self.send_header(name, value)
                self.end_headers()
                self.wfile.write(body)

            def _send_error(self, message: str, status: int = 400, details: Optional[Dict[str, Any]] = None):
                data = {"error": message}
                if details is not None:
                    data["details"] = details
                self._send_json(data, status)

            def do_GET(self):
                path = urlparse(self.path).path

                if path.startswith("/notifications/"):
                    key = path[len("/notifications/"):]
                    stored = self.server_ref.store.get(key)
                    if stored is None:
                        self._send_error("Notification not found", 404)
                        return
                    self._send_json(stored.document)

                elif path == "/health":
                    self._send_json({"status": "ok"})

                else:
                    self._send_error("Not found", 404)

            def do_POST(self):
                if urlparse(self.path).path != "/inbox":
                    self._send_error("Not found", 404)
                    return

                try:
                    content_length = int(self.headers.get("Content-Length", 0))
                except ValueError:
                    content_length = -1
                if content_length < 0:
                    self._send_error("Invalid Content-Length header", 400)
                    return
                body = self.rfile.read(content_length)

                try:
                    receipt = self.server_ref.server.receive(body, validate=self.server_ref.validate)
                except COARNotifyServerError as e:
                    details = e.validation_error.to_dict() if e.validation_error is not None else None
                    self._send_error(e.message, e.status, details)
                    return
                except NotifyException as e:
                    logger.warning(f"Rejected notification: {e}")
                    self._send_error(str(e), 400)
                    return

                if receipt.status == COARNotifyReceipt.CREATED:
                    self._send_json(
                        {"status": "created", "location": receipt.location},
                        receipt.status,
                        {"Location": receipt.location} if receipt.location else None,
                    )
                else:
                    self._send_json({"status": "accepted"}, receipt.status)

        return RequestHandler

    def make_server(self) -> HTTPServer:
        """Bind the HTTP server. Location URLs use the port actually bound."""
        handler = self._create_handler()
        self.httpd = HTTPServer((self.host, self.port), handler)
        self.port = self.httpd.server_address[1]
        self.binding.base_url = f"http://{self.host}:{self.port}"
        return self.httpd

    def start(self):
        """Start the inbox (blocking)."""
        httpd = self.httpd if self.httpd is not None else self.make_server()
        logger.info(f"COAR Notify inbox starting on {self.host}:{self.port}")
        print(f"COAR Notify inbox running on {self.inbox_url}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nShutting down...")
        finally:
            httpd.server_close()

    def start_background(self) -> threading.Thread:
        """Start the inbox in a background thread. The port is bound before this returns."""
        if self.httpd is None:
            self.make_server()
        thread = threading.Thread(target=self.httpd.serve_forever)
        thread.daemon = True
        thread.start()
        logger.info(f"COAR Notify inbox running in background on {self.host}:{self.port}")
        return thread

    def shutdown(self):
        """Stop a running inbox and release its socket."""
        if self.httpd is not None:
            self.httpd.shutdown()
            self.httpd.server_close()
            self.httpd = None

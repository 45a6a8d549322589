"""HTTP server adapter for webhook receiver.

Provides a threaded HTTP server using Python's built-in http.server module,
with request handling delegated to coroutines on the application's asyncio
event loop.

Deliveries are authenticated with a shared secret carried in a request
header (``x-webhook-secret`` by default). Authentication can be switched
off explicitly for local testing.
"""

import asyncio
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Coroutine
from urllib.parse import urlsplit

from treatrelay.adapters.webhook.receiver import WebhookReceiver
from treatrelay.core.auth import DEFAULT_SECRET_HEADER, SharedSecretAuthenticator
from treatrelay.core.ports import TriggerFailedError

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 1024 * 1024
GENERIC_ERROR_MESSAGE = "internal server error"
HEALTH_PATHS = ("/", "/health")


def make_webhook_handler(
    webhook_receiver: WebhookReceiver,
    event_loop: asyncio.AbstractEventLoop,
    authenticator: SharedSecretAuthenticator,
    webhook_path: str,
    expose_error_details: bool,
    request_timeout_seconds: float,
) -> type[BaseHTTPRequestHandler]:
    """Factory to create a WebhookHTTPHandler class with instance-specific state.

    Creates a handler class with closure-captured dependencies instead of
    using class-level mutable state.

    Args:
        webhook_receiver: Receiver for webhook deliveries
        event_loop: Event loop for async operations
        authenticator: Shared-secret check applied to webhook deliveries
        webhook_path: Path the provider posts deliveries to
        expose_error_details: Whether 500 responses carry the exception message
        request_timeout_seconds: Upper bound on handling a single delivery

    Returns:
        A WebhookHTTPHandler class configured with the provided dependencies
    """

    class WebhookHTTPHandler(BaseHTTPRequestHandler):
        """HTTP request handler for the webhook endpoint."""

        def _path(self) -> str:
            return urlsplit(self.path).path

        def do_POST(self) -> None:
            """Handle a webhook delivery."""
            try:
                content_length = int(self.headers.get("Content-Length", 0))
            except ValueError:
                self._send_json(400, {"error": "invalid content-length"})
                return

            if content_length > MAX_BODY_SIZE:
                self._send_json(413, {"error": "request body too large"})
                return

            # Drain the body before any early response so the socket closes cleanly
            body = self.rfile.read(content_length) if content_length > 0 else b""

            if self._path() != webhook_path:
                self._send_json(404, {"error": "not found"})
                return

            if not authenticator.is_authorized(self.headers):
                logger.warning(
                    "Unauthorized webhook delivery",
                    extra={"client": self.client_address[0]},
                )
                self._send_json(401, {"error": "unauthorized"})
                return

            # Body is JSON whatever the declared content type
            try:
                payload = json.loads(body) if body.strip() else {}
            except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
                self._send_json(400, {"error": "invalid json"})
                return

            try:
                result = self._run_async(webhook_receiver.handle_delivery(payload))
            except TriggerFailedError as e:
                self._send_json(502, {"error": str(e)})
                return
            except Exception as e:
                logger.error(f"Error handling webhook request: {e}", exc_info=True)
                if expose_error_details:
                    message = str(e) or type(e).__name__
                else:
                    message = GENERIC_ERROR_MESSAGE
                self._send_json(500, {"error": message})
                return

            self._send_json(200, result)

        def do_GET(self) -> None:
            """Handle GET requests.

            Health check is public (no auth required).
            """
            if self._path() in HEALTH_PATHS:
                self._send_text(200, "OK")
            else:
                self._send_json(404, {"error": "not found"})

        def _run_async(self, coro: Coroutine[Any, Any, Any]) -> Any:
            """Run a coroutine on the application event loop and wait for it."""
            future = asyncio.run_coroutine_threadsafe(coro, event_loop)
            try:
                return future.result(timeout=request_timeout_seconds)
            except TimeoutError:
                future.cancel()
                raise

        def _send_json(self, status: int, data: dict[str, Any]) -> None:
            """Send JSON response."""
            encoded = json.dumps(data).encode()
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            self.wfile.write(encoded)

        def _send_text(self, status: int, text: str) -> None:
            """Send plain-text response."""
            encoded = text.encode()
            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            self.wfile.write(encoded)

        def log_message(self, format: str, *args: Any) -> None:
            """Log HTTP request."""
            logger.debug(f"HTTP {self.client_address[0]}: {format % args}")

    return WebhookHTTPHandler


class WebhookHTTPServer:
    """Webhook HTTP server adapter.

    Serves the provider's delivery endpoint and a public health check.
    """

    def __init__(
        self,
        webhook_receiver: WebhookReceiver,
        host: str = "0.0.0.0",
        port: int = 8080,
        webhook_path: str = "/helius",
        secret: str | None = None,
        secret_header: str = DEFAULT_SECRET_HEADER,
        require_auth: bool = True,
        expose_error_details: bool = True,
        request_timeout_seconds: float = 30.0,
    ):
        """Initialize the HTTP server.

        Args:
            webhook_receiver: WebhookReceiver instance to handle deliveries.
            host: Host to listen on (default 0.0.0.0).
            port: Port to listen on (default 8080, 0 picks a free port).
            webhook_path: Path deliveries are posted to (default /helius).
            secret: Shared secret expected in ``secret_header``.
            secret_header: Name of the header carrying the secret.
            require_auth: Whether to require the shared secret (default True).
            expose_error_details: Whether 500 responses carry the exception message.
            request_timeout_seconds: Upper bound on handling a single delivery.

        Raises:
            ValueError: If require_auth is True but no secret is provided.
        """
        if require_auth and not secret:
            raise ValueError(
                "require_auth=True but no webhook secret provided; "
                "set WEBHOOK_SECRET or disable auth explicitly"
            )
        if not webhook_path.startswith("/"):
            raise ValueError(f"webhook_path must start with '/', got {webhook_path!r}")

        self.webhook_receiver = webhook_receiver
        self.host = host
        self.port = port
        self.webhook_path = webhook_path
        self.require_auth = require_auth
        self.expose_error_details = expose_error_details
        self.request_timeout_seconds = request_timeout_seconds
        self.authenticator = SharedSecretAuthenticator(
            secret=secret, header_name=secret_header, enabled=require_auth
        )
        self.server: ThreadingHTTPServer | None = None
        self._server_task: asyncio.Task[None] | None = None

        if not require_auth:
            logger.warning(
                "Webhook authentication is disabled. "
                "Any caller can trigger the relay."
            )

    async def start(self) -> None:
        """Start the HTTP server."""
        handler_class = make_webhook_handler(
            webhook_receiver=self.webhook_receiver,
            event_loop=asyncio.get_running_loop(),
            authenticator=self.authenticator,
            webhook_path=self.webhook_path,
            expose_error_details=self.expose_error_details,
            request_timeout_seconds=self.request_timeout_seconds,
        )

        self.server = ThreadingHTTPServer((self.host, self.port), handler_class)
        # Pick up the real port when bound to port 0
        self.port = self.server.server_address[1]

        self._server_task = asyncio.create_task(self._run_server())
        logger.info(
            f"listening on {self.host}:{self.port}",
            extra={"webhook_path": self.webhook_path, "require_auth": self.require_auth},
        )

    async def _run_server(self) -> None:
        """Run the HTTP server loop in a worker thread."""
        if not self.server:
            return

        try:
            await asyncio.to_thread(self.server.serve_forever)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Webhook HTTP server error: {e}", exc_info=True)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self.server:
            await asyncio.to_thread(self.server.shutdown)
            self.server.server_close()
        if self._server_task:
            try:
                await self._server_task
            except asyncio.CancelledError:
                pass
        logger.info("Webhook HTTP server stopped")

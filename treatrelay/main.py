"""Composition root for the treat relay.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- HTTP server lifecycle
"""

import asyncio
import logging
import sys

from treatrelay.adapters.trigger.http_trigger import HttpTriggerAdapter
from treatrelay.adapters.webhook.http_server import WebhookHTTPServer
from treatrelay.adapters.webhook.receiver import WebhookReceiver
from treatrelay.config import Settings, load_settings
from treatrelay.core.debounce import Debouncer
from treatrelay.core.detector import TransferDetector
from treatrelay.core.relay_service import RelayService


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def build_server(settings: Settings) -> tuple[WebhookHTTPServer, HttpTriggerAdapter]:
    """Wire adapters and core services from settings.

    Returns:
        The webhook server and the trigger adapter (which owns an HTTP
        client that must be closed on shutdown).
    """
    trigger = HttpTriggerAdapter(
        trigger_url=settings.trigger_url,
        method=settings.trigger_method,
        timeout_seconds=settings.trigger_timeout_seconds,
    )

    relay_service = RelayService(
        detector=TransferDetector(settings.watched_account),
        debouncer=Debouncer(cooldown_ms=settings.cooldown_ms),
        trigger=trigger,
    )

    http_server = WebhookHTTPServer(
        webhook_receiver=WebhookReceiver(relay_port=relay_service),
        host=settings.webhook_host,
        port=settings.webhook_port,
        webhook_path=settings.webhook_path,
        secret=settings.webhook_secret or None,
        secret_header=settings.webhook_secret_header,
        require_auth=settings.webhook_require_auth,
        expose_error_details=settings.expose_error_details,
        # Leave headroom over the trigger call itself
        request_timeout_seconds=settings.trigger_timeout_seconds + 5.0,
    )
    return http_server, trigger


async def bootstrap() -> None:
    """Load configuration, wire adapters, and serve until cancelled.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Validate required settings
    4. Instantiate adapters and core services
    5. Start the webhook server

    Raises:
        SystemExit: On missing required configuration
        asyncio.CancelledError: On graceful shutdown signal
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    log_level = "DEBUG" if settings.debug else settings.log_level
    configure_logging(log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading treat relay...")

    # Step 3: Validate required settings
    missing = settings.missing_required()
    if missing:
        logger.error(f"Missing required configuration: {', '.join(missing)}")
        sys.exit(1)

    # Step 4: Wire components
    http_server, trigger = build_server(settings)
    logger.info(
        f"Watching {settings.watched_account} "
        f"(cooldown {settings.cooldown_ms}ms, trigger {settings.trigger_method})"
    )

    # Step 5: Serve
    try:
        await http_server.start()
        while True:
            await asyncio.sleep(1)
    finally:
        await http_server.stop()
        await trigger.close()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

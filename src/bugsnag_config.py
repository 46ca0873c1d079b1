"""
Error reporting to Bugsnag.

Reporting is switched off unless `BUGSNAG_API_KEY` is set. The environment is
read when the functions are called, not at import time.
"""

import logging
import os

import bugsnag
from bugsnag.asgi import BugsnagMiddleware
from bugsnag.handlers import BugsnagHandler
from fastapi import Request

logger = logging.getLogger(__name__)


def bugsnag_enabled() -> bool:
    return bool(os.environ.get("BUGSNAG_API_KEY"))


def configure_bugsnag() -> bool:
    """
    Configure the Bugsnag client from the environment.

    Returns
    -------
    bool
        True if reporting was configured, False if it is disabled.
    """
    if not bugsnag_enabled():
        logger.warning("BUGSNAG_API_KEY is not set - error reporting is disabled")
        return False

    environment = os.environ.get("ENVIRONMENT", "development")
    version = os.environ.get("RELEASE_VERSION", "dev")
    bugsnag.configure(
        api_key=os.environ["BUGSNAG_API_KEY"],
        project_root=os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
        release_stage=environment,
        app_version=version,
        notify_release_stages=["production", "staging"],
        app_type="fastapi",
    )
    logger.info("Bugsnag configured - environment: %s, version: %s", environment, version)
    return True


def setup_bugsnag_logging(level: int = logging.ERROR) -> BugsnagHandler | None:
    """
    Forward log records at `level` and above to Bugsnag.

    Parameters
    ----------
    level : int
        Minimum log level to send to Bugsnag.

    Returns
    -------
    BugsnagHandler | None
        The handler attached to the root logger, or None if reporting is disabled.
    """
    if not bugsnag_enabled():
        return None
    handler = BugsnagHandler()
    handler.setLevel(level)
    logging.getLogger().addHandler(handler)
    return handler


def notify(exc: BaseException, request: Request | None = None, **metadata) -> None:
    """
    Report an exception, tagging it with the request that raised it.

    The detail of HTTP errors and the wrapped database error, if any, are
    attached as metadata.
    """
    if not bugsnag_enabled():
        return
    context = None
    if request is not None:
        context = f"{request.method} {request.url.path}"
        metadata["request"] = {"url": str(request.url), "method": request.method}
    if (detail := getattr(exc, "detail", None)) is not None:
        metadata["error"] = {"detail": detail}
        if exc.__cause__ is not None:
            metadata["error"]["cause"] = repr(exc.__cause__)
    bugsnag.notify(exc, context=context, metadata=metadata)


def get_bugsnag_middleware(app):
    """Wrap an ASGI app with the Bugsnag middleware when reporting is enabled."""
    if not bugsnag_enabled():
        return app
    return BugsnagMiddleware(app)

"""Translation of service errors into HTTP responses."""
import logging

from fastapi import HTTPException

from portfolio_proxy.errors import ServiceError


def to_http_exception(error: ServiceError, logger: logging.Logger, context: str) -> HTTPException:
    """Log a service failure and build the matching HTTPException.

    Client errors are logged at warning level, everything else at error level.

    Args:
        error: Failure raised by a service or transformer
        logger: Logger of the calling controller
        context: Short description of the failed operation

    Returns:
        HTTPException carrying the error's status and message
    """
    if error.status_code < 500:
        logger.warning(f"{context} rejected ({error.status_code}): {error.message}")
    else:
        logger.error(f"{context} failed ({error.status_code}): {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.message)

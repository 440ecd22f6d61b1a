"""DRF exception handler translating domain errors into HTTP responses."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PolicyError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PolicyError, status.HTTP_402_PAYMENT_REQUIRED),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainError) -> int:
    for error_class, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):  # type: ignore
    """Return {"detail", "code", "context"} for domain errors, defer otherwise."""

    if isinstance(exc, DomainError):
        http_status = status_for(exc)
        view = context.get("view")
        logger.info(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'view'}: "
            f"{exc.message} -> {http_status}"
        )
        headers = {"Retry-After": "1"} if isinstance(exc, StorageError) else None
        return Response(exc.to_dict(), status=http_status, headers=headers)
    return drf_exception_handler(exc, context)

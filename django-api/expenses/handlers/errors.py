"""Map domain errors to HTTP responses.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Anything that is not a
DomainError goes to the DRF default handler.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from expenses.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EXPENSE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PERSON_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EXPENSE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ITEM_ALREADY_CLAIMED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ITEM_NOT_CLAIMED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TOTAL_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BILL_PARSE_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.INGESTION_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_body(error: DomainError) -> dict:
    return {"code": error.code.value, "message": error.message}


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
        if status_code >= 500:
            logger.warning("Request failed with %s", exc)
        return Response(error_body(exc), status=status_code)
    return exception_handler(exc, context)

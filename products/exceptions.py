# products/exceptions.py

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

NOT_FOUND = 'NOT_FOUND'
NOT_OWNER = 'NOT_OWNER'


class ProductError(Exception):
    """Base for errors the product service reports back to the caller."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ProductNotFound(ProductError):
    """
    The product does not exist, or the caller does not own it.

    Both cases share the same status and message so callers cannot probe
    for products they do not own. ``reason`` tells them apart internally.
    """
    default_message = 'Product not found'

    def __init__(self, product_id=None, reason=NOT_FOUND):
        super().__init__()
        self.product_id = product_id
        self.reason = reason


class DuplicateReview(ProductError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Product already reviewed'


class ProductWriteFailed(ProductError):
    """The store refused a write (bad field values, integrity errors)."""
    default_message = 'Product could not be saved'


def product_exception_handler(exc, context):
    """DRF exception handler rendering product errors as ``{"message": ...}``."""
    if isinstance(exc, ProductError):
        view = context.get('view')
        logger.info(
            "%s in %s: %s (reason=%s)",
            type(exc).__name__,
            type(view).__name__ if view else '-',
            exc.message,
            getattr(exc, 'reason', '-'),
        )
        return Response({'message': exc.message}, status=exc.status_code)

    return exception_handler(exc, context)

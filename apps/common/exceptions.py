"""
Domain error taxonomy and the custom exception handler for consistent API responses.

Business errors are raised by the service layer and surfaced unchanged to the
caller; the handler below only decides how they are rendered.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class BusinessError(Exception):
    """Base class for every error the core reports to its callers."""
    code = 'business_error'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request could not be processed'

    def __init__(self, message=None, **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def as_dict(self):
        data = {'code': self.code, 'detail': self.message}
        data.update(self.extra)
        return data


class ValidationError(BusinessError):
    """Malformed input. Nothing was applied."""
    code = 'validation_error'
    default_message = 'Validation error'


class InvalidArgument(ValidationError):
    """A pure helper was called with a value outside its contract."""
    code = 'invalid_argument'
    default_message = 'Invalid argument'


class NotFound(BusinessError):
    code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Resource not found'


class ShopNotFound(NotFound):
    code = 'shop_not_found'
    default_message = 'Shop not found'


class ProductNotFound(NotFound):
    code = 'product_not_found'
    default_message = 'Product not found'


class CustomerNotFound(NotFound):
    code = 'customer_not_found'
    default_message = 'Customer not found'


class SaleNotFound(NotFound):
    code = 'sale_not_found'
    default_message = 'Sale not found'


class InsufficientStock(BusinessError):
    code = 'insufficient_stock'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Insufficient stock'

    def __init__(self, product_id, available, requested, message=None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            message or f'Insufficient stock for product {product_id}: '
                       f'{available} available, {requested} requested',
            product_id=product_id,
            available=available,
            requested=requested,
        )


class InsufficientPoints(BusinessError):
    code = 'insufficient_points'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Insufficient points'

    def __init__(self, available, requested, message=None):
        self.available = available
        self.requested = requested
        super().__init__(
            message or f'Insufficient points: {available} available, {requested} requested',
            available=available,
            requested=requested,
        )


class ProgramDisabled(BusinessError):
    """Loyalty is switched off for the shop; points cannot be redeemed."""
    code = 'program_disabled'
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Loyalty program is not enabled for this shop'


class PersistenceFailure(BusinessError):
    """The atomic commit could not complete. Everything was rolled back."""
    code = 'persistence_failure'
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'The operation could not be saved, nothing was changed'


class PersistenceTimeout(PersistenceFailure):
    code = 'persistence_timeout'
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = 'The operation timed out waiting for the database, nothing was changed'


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    if isinstance(exc, BusinessError):
        if isinstance(exc, PersistenceFailure):
            logger.error(f"Persistence failure: {exc}", exc_info=True)
        else:
            logger.warning(f"Business rule rejected request: {exc}")
        return Response({
            'code': exc.status_code,
            'msg': exc.message,
            'errors': exc.as_dict(),
        }, status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        logger.error(f"API Exception: {exc}")

        # Create custom error response format
        custom_response_data = {
            'code': response.status_code,
            'msg': 'An error occurred',
            'errors': response.data
        }

        # Handle specific error types
        if response.status_code == status.HTTP_400_BAD_REQUEST:
            custom_response_data['msg'] = 'Validation error'
        elif response.status_code == status.HTTP_401_UNAUTHORIZED:
            custom_response_data['msg'] = 'Authentication required'
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            custom_response_data['msg'] = 'Permission denied'
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            custom_response_data['msg'] = 'Resource not found'
        elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            custom_response_data['msg'] = 'Method not allowed'

        response.data = custom_response_data

    return response


TIMEOUT_MARKERS = ('timeout', 'timed out', 'lock wait', 'database is locked', 'deadlock')


def persistence_error(exc):
    """
    Map a database error raised inside an atomic block to the domain error
    reported to callers. The atomic block has already rolled back.
    """
    text = str(exc).lower()
    if any(marker in text for marker in TIMEOUT_MARKERS):
        return PersistenceTimeout(f"Database timed out: {exc}")
    return PersistenceFailure(f"Database error: {exc}")

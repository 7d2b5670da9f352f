"""
Shipping Exceptions
Errors surfaced by the shipping estimate service.
"""


class ShippingException(Exception):
    """Base exception for shipping-related errors."""
    pass


class ShippingValidationException(ShippingException):
    """Exception raised when the estimate request payload is invalid."""
    pass


class ShippingDataUnavailableException(ShippingException):
    """
    Exception raised when the reference data cannot be used at all
    (no active methods seeded, or the database cannot be read).
    Callers hide the shipping and tax rows instead of blocking checkout.
    """
    pass

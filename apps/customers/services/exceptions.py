"""Domain exceptions for customers app."""


class CustomerServiceError(Exception):
    """Base exception for all customer service errors."""
    pass


class CustomerNotFoundError(CustomerServiceError):
    """Customer does not exist."""
    pass

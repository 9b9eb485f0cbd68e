"""Custom exceptions for the charterdesk package."""


class CharterDeskException(Exception):
    """Base exception for charterdesk."""
    
    pass


class NotFoundError(CharterDeskException):
    """Raised when a deal or round is not found."""
    
    pass


class DatabaseError(CharterDeskException):
    """Raised when a database operation fails."""
    
    pass


class ConfigurationError(CharterDeskException):
    """Raised when configuration is invalid."""
    
    pass

"""
Domain exceptions for the prediction system.
"""

class PredictionException(Exception):
    """Base exception for prediction-related errors."""
    pass

class InvalidInputException(PredictionException, ValueError):
    """Exception raised when an input violates its contract (malformed shape, impossible values)."""
    pass

class DataSourceException(PredictionException):
    """Base exception for failures of an upstream data source."""
    pass

class DataSourceNotConfiguredException(DataSourceException):
    """Exception raised when a data source is used without credentials."""
    pass

class RateLimitExceededException(DataSourceException):
    """Exception raised when the request budget of a data source is exhausted."""
    pass

class UpstreamResponseException(DataSourceException):
    """Exception raised when a data source answers with an error or an unreadable payload."""
    pass

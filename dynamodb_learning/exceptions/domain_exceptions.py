"""
Exceptions raised locally by the wrapper.

1. Argument errors, detected before any request is built
2. Client lifecycle errors (session construction, use after close)

Service-side failures are not represented here: botocore exceptions
propagate to the caller as they are.
"""

from typing import Any, Dict, Optional

from .base import DynamoDBLearningError


# =============================================================================
# Argument Errors
# =============================================================================

class InvalidArgumentError(DynamoDBLearningError, ValueError):
    """Raised when a required argument is missing, empty or unusable.

    Used for:
    - Empty or blank table names, key names and key type codes
    - ``None`` attribute maps, keys and model instances
    - Model classes that cannot be mapped to a table schema
    - Model instances whose partition key is not set
    """

    def __init__(self, message: str, argument: Optional[str] = None):
        """Initialize invalid argument error.

        Args:
            message: Human-readable error message
            argument: Name of the offending parameter
        """
        self.argument = argument
        context = {}
        if argument:
            context['argument'] = argument
        super().__init__(message, None, context)

    @classmethod
    def empty(cls, argument: str) -> 'InvalidArgumentError':
        return cls(f"{argument} cannot be null or empty", argument)

    @classmethod
    def null(cls, argument: str) -> 'InvalidArgumentError':
        return cls(f"{argument} cannot be null", argument)


# =============================================================================
# Client Lifecycle Errors
# =============================================================================

class ConnectionError(DynamoDBLearningError):
    """Raised when the boto3 session or client cannot be used.

    Used for:
    - Failures while constructing the boto3 session, client or resource
    - Access to the client after ``close()``
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, original_error, context)

from typing import Any, Dict, Optional


class DynamoDBLearningError(Exception):
    """Base exception for errors raised by the wrapper itself.

    Errors reported by DynamoDB (botocore ``ClientError``) are not subclasses
    of this class; they reach the caller unchanged.

    Attributes:
        message: Human-readable error message
        original_error: Exception that triggered this one, if any
        context: Key/value details appended to the message
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Build the error.

        Args:
            message: Human-readable error message
            original_error: Exception that triggered this one
            context: Details such as the offending argument or region
        """
        self.message = message
        self.original_error = original_error
        self.context = dict(context) if context else {}
        super().__init__(message)

    def _format_context(self) -> str:
        return ", ".join(f"{key}={value}" for key, value in self.context.items())

    def __str__(self) -> str:
        """Message followed by the context details, when there are any."""
        if not self.context:
            return self.message
        return f"{self.message} (Context: {self._format_context()})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"original_error={self.original_error!r}, context={self.context!r})"
        )

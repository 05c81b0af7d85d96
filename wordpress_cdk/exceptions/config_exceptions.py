class StackConfigError(Exception):
    """Base class for stack configuration errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingPlaceholderError(StackConfigError):
    """Raised when a required DNS or TLS placeholder is empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            f"Container stack placeholders are empty: {', '.join(fields)}."
        )


class InvalidCidrError(StackConfigError):
    """Raised when the operator SSH source is not a valid IPv4 CIDR block."""


class UnknownStackKindError(StackConfigError):
    """Raised when the stack selector names neither stack definition."""

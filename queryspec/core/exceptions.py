from typing import Any


class SpecificationError(Exception):
    """Base class for every error raised while turning request expressions into query specifications."""

    def __init__(self, message: str = "Invalid specification"):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return f"{self.message}"


class InvalidConstructionError(SpecificationError, ValueError):
    """Raised when a filter or order-by item is constructed with a missing attribute, operator, direction or value."""

    pass


class IllegalSpecificationError(SpecificationError):
    """
    Raised when a specification cannot be created from an otherwise well formed item,
    or when the specification machinery is misconfigured.
    """

    pass


class ParserNotProvidedError(IllegalSpecificationError):
    """Raised when a request carries a filter/sort channel for which no parser was configured."""

    def __init__(self, channel: str):
        self.channel = channel
        super().__init__(f"Request parameter '{channel}' was provided, but no parser is configured for it")


class OperatorArityMismatchError(IllegalSpecificationError):
    """Raised when an operator's declared arity does not fit the filter item it is used with."""

    def __init__(self, operator: Any, item_type: str, detail: str | None = None):
        self.operator = operator
        self.item_type = item_type
        message = f"Operator '{operator}' cannot be used with {item_type}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnsupportedOperatorError(IllegalSpecificationError):
    """Raised for operator tokens that are unknown or have no registered predicate strategy."""

    def __init__(self, operator: Any):
        self.operator = operator
        super().__init__(f"Unsupported filter operator '{operator}'")


class ExpressionParseError(IllegalSpecificationError):
    """Raised when a raw filter or sort expression does not follow the expected grammar."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Invalid expression '{expression}': {reason}")


class ValueConversionError(SpecificationError):
    """Raised when a raw string value cannot be coerced to the native type of the filtered attribute."""

    def __init__(self, value: Any, target_type: Any, reason: str | None = None):
        self.value = value
        self.target_type = target_type
        type_name = getattr(target_type, "__name__", None) or type(target_type).__name__
        message = f"Cannot convert value '{value}' to {type_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AttributeResolutionError(SpecificationError):
    """Raised when an attribute path does not resolve to a column of the queried entity or its relations."""

    def __init__(self, attribute_path: str, reason: str):
        self.attribute_path = attribute_path
        super().__init__(f"Invalid attribute '{attribute_path}': {reason}")


def registered_exceptions() -> dict:
    """Returns a dictionary of registered exceptions and their default messages."""
    return {
        InvalidConstructionError: "The filter or sort item is incomplete",
        ParserNotProvidedError: "This filter or sort parameter is not supported",
        OperatorArityMismatchError: "The operator was given the wrong number of values",
        UnsupportedOperatorError: "The filter operator is not supported",
        ExpressionParseError: "The filter or sort expression is malformed",
        ValueConversionError: "A filter value does not match the attribute type",
        AttributeResolutionError: "The filter or sort attribute does not exist",
    }

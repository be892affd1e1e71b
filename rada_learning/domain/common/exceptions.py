"""
Domain layer exceptions.

These exceptions represent broken business rules. Each one carries a stable
`code` so the API layer can translate it without inspecting messages.
"""


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain exceptions inherit from this class so they can be caught and
    handled uniformly.
    """

    code = "domain_error"

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    """
    Raised when input is malformed.

    Example: a non-positive XP amount, an answer index outside the options.
    """

    code = "validation_error"

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        details: dict[str, object] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigurationError(DomainError):
    """
    Raised when authored content (badge rules, reward tiers) is invalid.

    Surfaced when the definition is saved, never skipped at evaluation time.
    """

    code = "configuration_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class EntityNotFoundError(DomainError):
    """
    Raised when an entity cannot be found.

    Example: completing a lesson id that does not exist.
    """

    code = "not_found"

    def __init__(self, entity_type: str, entity_id: object) -> None:
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, {"entity_type": entity_type, "entity_id": entity_id})
        self.entity_type = entity_type
        self.entity_id = entity_id


class BusinessRuleViolationError(DomainError):
    """
    Raised when a state transition is not allowed by a business rule.

    Specialised by the learning context (locked lessons, closed challenges...).
    """

    code = "business_rule_violation"

    def __init__(self, rule: str, message: str | None = None, **details: object) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, {"rule": rule, **details})
        self.rule = rule

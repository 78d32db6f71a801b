"""
Base validator class that all record checks inherit from.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional

from .config import Config
from .exceptions import InvalidInputError


class BaseValidator(ABC):
    """Abstract base class for all record validators.

    All validators must inherit from this class and implement `explain`.
    Validators keep no per-call state: everything a check finds is returned
    to the caller, so a single instance can be shared between threads.

    Attributes:
        name (str): The display name of the validator.
        field (str): The record field this validator checks (e.g. "email").
        category (str): A category for grouping validators (e.g., "Document").
        description (str): A brief explanation of what the validator checks.
    """

    name: str = "UnnamedValidator"
    field: str = ""
    category: str = "General"
    description: str = "No description provided"

    def __init__(self, config: Optional[Config] = None) -> None:
        """Initializes the validator.

        Args:
            config (Optional[Config]): The application's configuration object.
                Defaults to the built-in defaults, ignoring config files.
        """
        self.config = config if config is not None else Config.defaults()

    @abstractmethod
    def explain(self, value: Any) -> List[str]:
        """Lists the rules that ``value`` fails.

        Returns:
            List[str]: One message per failed rule. Empty when valid.
        """
        raise NotImplementedError("Subclasses must implement explain()")

    def validate(self, value: Any) -> bool:
        """Returns True when ``value`` passes every rule."""
        return not self.explain(value)

    def describe(self, value: Any) -> Dict[str, Any]:
        """Returns derived values for a valid ``value`` (masked form, domain...)."""
        return {}

    def advise(self, value: Any) -> List[str]:
        """Returns warnings that do not make ``value`` invalid."""
        return []

    def check(self, value: Any) -> Dict[str, Any]:
        """Runs the validator and returns the results in a standardized format.

        Args:
            value (Any): The value to check.

        Returns:
            Dict[str, Any]: A dictionary containing the validator's name,
            field, category, description, validity and any findings.
        """
        errors = self.explain(value)
        return {
            "name": self.name,
            "field": self.field,
            "category": self.category,
            "description": self.description,
            "valid": not errors,
            "errors": errors,
            "warnings": [] if errors else self.advise(value),
            "info": {} if errors else self.describe(value),
        }

    def require_string(self, value: Any, message: Optional[str] = None) -> str:
        """Returns ``value`` unchanged, or raises if it is not a string.

        Raises:
            InvalidInputError: If ``value`` is None or not a ``str``.
        """
        if value is None or not isinstance(value, str):
            raise InvalidInputError(message or f"{self.name} input must be a string, got {type(value).__name__}.")
        return value

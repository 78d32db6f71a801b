"""Checks password strength against a fixed composition policy.

A password must be 8 to 128 characters long, mix uppercase, lowercase,
digits and symbols, and avoid the cheap patterns people reach for: a
character typed three times in a row, three consecutive digits such as
``123`` or ``987`` (even when other characters sit between them), and
keyboard or alphabet walks like ``abc`` or ``qwe``.
"""
import re
from typing import Any, List, Optional

from ..core.base_validator import BaseValidator
from ..core.config import Config

COMPOSITION_RULES = [
    (re.compile(r"[A-Z]"), "Password must contain an uppercase letter."),
    (re.compile(r"[a-z]"), "Password must contain a lowercase letter."),
    (re.compile(r"[0-9]"), "Password must contain a digit."),
    (re.compile(r"[^A-Za-z0-9\s]"), "Password must contain a symbol."),
]

REPEATED_RUN = re.compile(r"(.)\1{2,}")

FORBIDDEN_SEQUENCES = ("abc", "qwe", "asd", "zxc")
FORBIDDEN_PATTERN = re.compile("|".join(FORBIDDEN_SEQUENCES), re.IGNORECASE)

MIN_LENGTH = 8
MAX_LENGTH = 128


def has_numeric_sequence(password: str) -> bool:
    """Returns True if the digits of ``password`` contain a 3-step run.

    Only the digits are scanned, in order, so ``"a1b2c3"`` contains the run
    ``123``.
    """
    digits = [int(ch) for ch in password if ch in "0123456789"]
    for a, b, c in zip(digits, digits[1:], digits[2:]):
        if b - a == c - b and abs(b - a) == 1:
            return True
    return False


class PasswordValidator(BaseValidator):
    """Enforces the password strength policy."""

    name = "Password"
    field = "password"
    category = "Security"
    description = "Checks password length, composition, runs and common sequences."

    def __init__(self, config: Optional[Config] = None) -> None:
        """Initializes the PasswordValidator.

        Configured length bounds can only narrow the 8 to 128 range.
        """
        super().__init__(config)
        self.min_length = max(MIN_LENGTH, self.config.get("validators.Password.min_length", MIN_LENGTH))
        self.max_length = min(MAX_LENGTH, self.config.get("validators.Password.max_length", MAX_LENGTH))

    def explain(self, value: Any) -> List[str]:
        password = self.require_string(value, "Password must be a string.")
        problems = []

        if not self.min_length <= len(password) <= self.max_length:
            problems.append(f"Password must be between {self.min_length} and {self.max_length} characters.")

        problems.extend(message for pattern, message in COMPOSITION_RULES if not pattern.search(password))

        if REPEATED_RUN.search(password):
            problems.append("Password must not repeat a character three or more times in a row.")
        if has_numeric_sequence(password):
            problems.append("Password must not contain three consecutive ascending or descending digits.")

        match = FORBIDDEN_PATTERN.search(password)
        if match:
            problems.append(f"Password must not contain the common sequence '{match.group(0).lower()}'.")

        return problems

"""Structural validation and normalization of email addresses.

The checks are purely syntactic and ASCII oriented: a single ``@``, a dotted
domain, no leading, trailing or doubled dots, and the usual length limits
(254 for the address, 64 for the local part, 253 for the domain and 63 for
each domain label). No DNS lookup is performed.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from ..core.base_validator import BaseValidator

MAX_EMAIL_LENGTH = 254
MAX_LOCAL_LENGTH = 64
MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63

BASIC_FORMAT = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]{2,}", re.IGNORECASE)


def split_email(email: str) -> Optional[Tuple[str, str]]:
    """Splits an address into local part and domain on its single ``@``."""
    parts = email.split("@")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


class EmailValidator(BaseValidator):
    """Validates email addresses and extracts their parts.

    Unlike the document validators, `validate` and the extraction helpers
    never raise: a non-string simply is not a valid address. Only
    `normalize` treats a non-string as caller misuse.
    """

    name = "Email"
    field = "email"
    category = "Contact"
    description = "Checks email structure, dot placement and length limits."

    def explain(self, value: Any) -> List[str]:
        if not isinstance(value, str):
            return ["Email address must be a string."]
        trimmed = value.strip()
        parts = split_email(trimmed)
        if parts is None:
            return ["Email address must contain exactly one '@'."]
        local, domain = parts

        problems = []
        if not BASIC_FORMAT.fullmatch(trimmed):
            problems.append("Email address must look like local@domain.tld without spaces.")
        if self._invalid_local(local):
            problems.append("Local part must not start or end with '.' or contain '..'.")
        if self._invalid_domain(domain):
            problems.append("Domain must not start or end with '.' or '-' or contain '..'.")
        if not self._valid_lengths(local, domain, trimmed):
            problems.append(
                f"Email address exceeds length limits (address {MAX_EMAIL_LENGTH}, local part "
                f"{MAX_LOCAL_LENGTH}, domain {MAX_DOMAIN_LENGTH}, label {MAX_LABEL_LENGTH})."
            )
        return problems

    def describe(self, value: Any) -> Dict[str, Any]:
        normalized = self.normalize(value)
        return {
            "normalized": normalized,
            "local_part": self.extract_local_part(normalized),
            "domain": self.extract_domain(normalized),
        }

    def advise(self, value: Any) -> List[str]:
        if value != self.normalize(value):
            return ["Address is not in normalized form (trimmed, lowercase)."]
        return []

    def normalize(self, email: Any) -> str:
        """Trims and lowercases an address.

        Raises:
            InvalidInputError: If ``email`` is None or not a string.
        """
        return self.require_string(email, "Email must be a string.").strip().lower()

    def extract_domain(self, email: Any) -> Optional[str]:
        """Returns the part after the ``@``, or None when there is not exactly one."""
        if not isinstance(email, str):
            return None
        parts = split_email(email.strip())
        return parts[1] if parts else None

    def extract_local_part(self, email: Any) -> Optional[str]:
        """Returns the part before the ``@``, or None when there is not exactly one."""
        if not isinstance(email, str):
            return None
        parts = split_email(email.strip())
        return parts[0] if parts else None

    def is_from_domain(self, email: Any, domain: Any) -> bool:
        """Checks whether ``email`` belongs to ``domain`` or one of its subdomains.

        Args:
            email (Any): The address to check.
            domain (Any): The target domain, e.g. ``"empresa.com"``.

        Returns:
            bool: True for a case-insensitive exact match or a ``.domain``
            suffix match, False otherwise (including a blank ``domain``).
        """
        if not isinstance(domain, str) or not domain.strip():
            return False
        email_domain = self.extract_domain(email)
        if not email_domain:
            return False
        email_domain = email_domain.lower()
        target = domain.lower()
        return email_domain == target or email_domain.endswith(f".{target}")

    @staticmethod
    def _invalid_local(local: str) -> bool:
        return local.startswith(".") or local.endswith(".") or ".." in local

    @staticmethod
    def _invalid_domain(domain: str) -> bool:
        return (
            domain.startswith((".", "-"))
            or domain.endswith((".", "-"))
            or ".." in domain
        )

    @staticmethod
    def _valid_lengths(local: str, domain: str, full: str) -> bool:
        labels = domain.split(".")
        return (
            len(full) <= MAX_EMAIL_LENGTH
            and 0 < len(local) <= MAX_LOCAL_LENGTH
            and 0 < len(domain) <= MAX_DOMAIN_LENGTH
            and all(0 < len(label) <= MAX_LABEL_LENGTH for label in labels)
        )

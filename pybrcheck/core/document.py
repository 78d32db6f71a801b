"""Shared behaviour for check-digit protected taxpayer documents.

CPF and CNPJ numbers have the same shape: a fixed number of digits, two
trailing check digits, a punctuation mask and a blacklist of repeated-digit
numbers. `DocumentValidator` implements that shape once; the concrete
validators only declare their lengths, weights, mask and remainder rule.
"""
import logging
import random
import re
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .base_validator import BaseValidator
from .checksum import CheckDigitMapping, check_digits, is_repeated, only_digits, random_digits
from .exceptions import GenerationError, InvalidLengthError

logger = logging.getLogger(__name__)


class DocumentValidator(BaseValidator):
    """Validates, masks and generates a check-digit protected document.

    Subclasses set the class attributes below. `groups` and `separators`
    describe the mask: group sizes in order, and the separator placed after
    each group but the last.
    """

    category = "Document"
    length: int = 0
    first_weights: Sequence[int] = ()
    second_weights: Sequence[int] = ()
    mapping: CheckDigitMapping = CheckDigitMapping.CPF
    groups: Tuple[int, ...] = ()
    separators: Tuple[str, ...] = ()
    blacklist: FrozenSet[str] = frozenset()
    unmasked_pattern: re.Pattern = re.compile(r"")
    masked_pattern: re.Pattern = re.compile(r"")
    partial_pattern: re.Pattern = re.compile(r"")

    @property
    def base_length(self) -> int:
        """Number of digits before the two check digits."""
        return self.length - 2

    def explain(self, value: Any) -> List[str]:
        raw = self.require_string(value)
        digits = only_digits(raw)
        if len(digits) != self.length:
            return [f"{self.name} must have {self.length} digits, got {len(digits)}."]
        if digits in self.blacklist:
            return [f"{self.name} cannot be a single repeated digit."]
        base = digits[:self.base_length]
        if digits != base + self._digits_for(base):
            return [f"{self.name} check digits do not match."]
        return []

    def describe(self, value: Any) -> Dict[str, Any]:
        digits = self.unmask(value)
        return {"masked": self.mask(digits), "unmasked": digits}

    def advise(self, value: Any) -> List[str]:
        allowed = set("0123456789") | set(self.separators) | {" "}
        ignored = sorted({ch for ch in value if ch not in allowed})
        if ignored:
            return [f"Ignored unexpected characters: {''.join(ignored)!r}."]
        return []

    def mask(self, value: Any) -> str:
        """Formats a document with its punctuation mask.

        Raises:
            InvalidInputError: If ``value`` is not a string.
            InvalidLengthError: If ``value`` does not hold exactly
                ``length`` digits.
        """
        digits = self.unmask(value)
        parts = []
        start = 0
        for size in self.groups:
            parts.append(digits[start:start + size])
            start += size
        masked = parts[0]
        for separator, part in zip(self.separators, parts[1:]):
            masked += separator + part
        return masked

    def unmask(self, value: Any) -> str:
        """Strips a document down to its digits.

        Raises:
            InvalidInputError: If ``value`` is not a string.
            InvalidLengthError: If ``value`` does not hold exactly
                ``length`` digits.
        """
        raw = self.require_string(value, f"{self.name} must be a string.")
        digits = only_digits(raw)
        if len(digits) != self.length:
            raise InvalidLengthError(f"{self.name} must have {self.length} digits.")
        return digits

    def is_valid_format(self, value: Any) -> bool:
        """Checks whether ``value`` looks like this document, fully or partially typed.

        The empty string and any left-anchored prefix of the mask are
        accepted, so the check can run on every keystroke of a form field.
        Check digits are not verified.
        """
        if not isinstance(value, str):
            return False
        if value == "":
            return True
        return bool(
            self.unmasked_pattern.fullmatch(value)
            or self.masked_pattern.fullmatch(value)
            or self.partial_pattern.fullmatch(value)
        )

    def generate(self, rng: Optional[random.Random] = None) -> str:
        """Generates a synthetic, valid, unmasked document for test data.

        Args:
            rng (Optional[random.Random]): Random source. Defaults to the
                module-level generator. Not suitable for secrets.

        Raises:
            GenerationError: If no acceptable number is drawn within
                ``generation.max_attempts`` attempts.
        """
        max_attempts = self.config.get("generation.max_attempts", 1000)
        for attempt in range(1, max_attempts + 1):
            base = self._random_base(rng)
            if is_repeated(base):
                logger.debug(f"{self.name} generation attempt {attempt}: repeated base {base}, retrying.")
                continue
            document = base + self._digits_for(base)
            if document in self.blacklist:
                logger.debug(f"{self.name} generation attempt {attempt}: blacklisted {document}, retrying.")
                continue
            return document
        raise GenerationError(f"Could not generate a valid {self.name} after {max_attempts} attempts.")

    def _random_base(self, rng: Optional[random.Random]) -> str:
        return random_digits(self.base_length, rng)

    def _digits_for(self, base: str) -> str:
        first, second = check_digits(base, self.first_weights, self.second_weights, self.mapping)
        return f"{first}{second}"

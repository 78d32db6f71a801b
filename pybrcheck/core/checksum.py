"""Weighted-sum modulo 11 check digit arithmetic.

CPF and CNPJ numbers both end in two check digits computed from the digits
before them. The summation is the same for both documents, but the way the
remainder is turned into a digit differs between the two national standards,
so the mapping is passed in explicitly instead of being folded into a single
formula.
"""
import random
from enum import Enum
from typing import FrozenSet, Optional, Sequence, Tuple

MODULUS = 11


class CheckDigitMapping(Enum):
    """How a weighted sum is turned into a single check digit."""

    CPF = "cpf"
    CNPJ = "cnpj"

    def digit_for(self, total: int) -> int:
        """Maps a weighted sum to its check digit.

        Args:
            total (int): The weighted sum of the base digits.

        Returns:
            int: The check digit, between 0 and 9.
        """
        if self is CheckDigitMapping.CPF:
            remainder = (total * 10) % MODULUS
            return 0 if remainder == 10 else remainder
        remainder = total % MODULUS
        return 0 if remainder < 2 else MODULUS - remainder


def only_digits(value: str) -> str:
    """Removes every character that is not a decimal digit."""
    return "".join(ch for ch in value if ch in "0123456789")


def is_repeated(value: str) -> bool:
    """Returns True for a non-empty string made of a single repeated character."""
    return bool(value) and len(set(value)) == 1


def build_blacklist(length: int) -> FrozenSet[str]:
    """Builds the set of repeated-digit strings of the given length.

    These numbers pass the checksum but do not identify anybody, so the
    document validators reject them before any arithmetic runs.

    Args:
        length (int): The document length (11 for CPF, 14 for CNPJ).

    Returns:
        FrozenSet[str]: ``{"000...0", "111...1", ..., "999...9"}``.
    """
    return frozenset(str(d) * length for d in range(10))


def weighted_sum(base: str, weights: Sequence[int]) -> int:
    """Computes ``sum(digit[i] * weight[i])`` over a digit string.

    Raises:
        ValueError: If ``base`` contains a non-digit or its length does not
            match the number of weights.
    """
    if len(base) != len(weights):
        raise ValueError(f"Expected {len(weights)} digits, got {len(base)}.")
    if not base.isdigit():
        raise ValueError(f"Check digit base must contain only digits: {base!r}")
    return sum(int(d) * w for d, w in zip(base, weights))


def check_digit(base: str, weights: Sequence[int], mapping: CheckDigitMapping) -> int:
    """Computes one check digit for ``base``."""
    return mapping.digit_for(weighted_sum(base, weights))


def check_digits(
    base: str,
    first_weights: Sequence[int],
    second_weights: Sequence[int],
    mapping: CheckDigitMapping,
) -> Tuple[int, int]:
    """Computes the two check digits of a document.

    The second digit is computed over the base followed by the first digit,
    which is why ``second_weights`` is one element longer.

    Args:
        base (str): The document digits without the check digits.
        first_weights (Sequence[int]): Weights for the first check digit.
        second_weights (Sequence[int]): Weights for the second check digit.
        mapping (CheckDigitMapping): The national remainder rule to apply.

    Returns:
        Tuple[int, int]: The first and second check digits.
    """
    first = check_digit(base, first_weights, mapping)
    second = check_digit(f"{base}{first}", second_weights, mapping)
    return first, second


def random_digits(length: int, rng: Optional[random.Random] = None) -> str:
    """Returns ``length`` random decimal digits. Not suitable for secrets."""
    source = rng or random
    return "".join(str(source.randrange(10)) for _ in range(length))

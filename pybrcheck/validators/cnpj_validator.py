"""Validates CNPJ numbers, the Brazilian company taxpayer registry.

A CNPJ has 14 digits: an 8-digit root identifying the company, a 4-digit
establishment code (``0001`` for the head office) and two check digits. The
check digits use fixed weight vectors and map a remainder below 2 to 0,
otherwise to ``11 - remainder``.
"""
import random
import re
from typing import Any, Dict, Optional

from ..core.checksum import CheckDigitMapping, build_blacklist, random_digits
from ..core.document import DocumentValidator

CNPJ_LENGTH = 14
ROOT_LENGTH = 8
HEAD_OFFICE_BRANCH = "0001"

CNPJ_BLACKLIST = build_blacklist(CNPJ_LENGTH)


class CNPJValidator(DocumentValidator):
    """Validates, masks and generates CNPJ numbers (``DD.DDD.DDD/DDDD-DD``)."""

    name = "CNPJ"
    field = "cnpj"
    description = "Checks CNPJ length, repeated-digit blacklist and check digits."

    length = CNPJ_LENGTH
    first_weights = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
    second_weights = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
    mapping = CheckDigitMapping.CNPJ
    groups = (2, 3, 3, 4, 2)
    separators = (".", ".", "/", "-")
    blacklist = CNPJ_BLACKLIST
    unmasked_pattern = re.compile(r"\d{14}", re.ASCII)
    masked_pattern = re.compile(r"\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}", re.ASCII)
    partial_pattern = re.compile(r"\d{0,2}(\.\d{0,3}){0,2}(/\d{0,4})?(-\d{0,2})?", re.ASCII)

    def root(self, value: Any) -> str:
        """Returns the 8-digit company root of a CNPJ."""
        return self.unmask(value)[:ROOT_LENGTH]

    def branch(self, value: Any) -> str:
        """Returns the 4-digit establishment code of a CNPJ."""
        return self.unmask(value)[ROOT_LENGTH:self.base_length]

    def describe(self, value: Any) -> Dict[str, Any]:
        info = super().describe(value)
        branch = self.branch(value)
        info.update({
            "root": self.root(value),
            "branch": branch,
            "head_office": branch == HEAD_OFFICE_BRANCH,
        })
        return info

    def _random_base(self, rng: Optional[random.Random]) -> str:
        # Synthetic numbers always belong to the head office.
        return random_digits(ROOT_LENGTH, rng) + HEAD_OFFICE_BRANCH

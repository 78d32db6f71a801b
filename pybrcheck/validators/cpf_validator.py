"""Validates CPF numbers, the Brazilian individual taxpayer registry.

A CPF has 11 digits: a 9-digit base followed by two check digits. Each check
digit is ``(sum * 10) mod 11`` over the preceding digits weighted from 10 (or
11) down to 2, with a remainder of 10 mapped to 0.
"""
import re

from ..core.checksum import CheckDigitMapping, build_blacklist
from ..core.document import DocumentValidator

CPF_LENGTH = 11

CPF_BLACKLIST = build_blacklist(CPF_LENGTH)


class CPFValidator(DocumentValidator):
    """Validates, masks and generates CPF numbers (``DDD.DDD.DDD-DD``)."""

    name = "CPF"
    field = "cpf"
    description = "Checks CPF length, repeated-digit blacklist and check digits."

    length = CPF_LENGTH
    first_weights = tuple(range(10, 1, -1))
    second_weights = tuple(range(11, 1, -1))
    mapping = CheckDigitMapping.CPF
    groups = (3, 3, 3, 2)
    separators = (".", ".", "-")
    blacklist = CPF_BLACKLIST
    unmasked_pattern = re.compile(r"\d{11}", re.ASCII)
    masked_pattern = re.compile(r"\d{3}\.\d{3}\.\d{3}-\d{2}", re.ASCII)
    partial_pattern = re.compile(r"\d{0,3}(\.\d{0,3}){0,2}(-\d{0,2})?", re.ASCII)

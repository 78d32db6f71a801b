"""The record validators shipped with pybrcheck.

This package contains the individual validator implementations that are
dynamically discovered and run by the core validation engine. Each module in
this package should contain one class that inherits from
`pybrcheck.core.base_validator.BaseValidator`.
"""
from .cnpj_validator import CNPJValidator
from .cpf_validator import CPFValidator
from .email_validator import EmailValidator
from .password_validator import PasswordValidator

__all__ = ["CNPJValidator", "CPFValidator", "EmailValidator", "PasswordValidator"]

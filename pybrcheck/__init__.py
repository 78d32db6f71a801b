"""pybrcheck: Brazilian record validators.

This package provides validators and formatters for CPF and CNPJ taxpayer
numbers, email addresses and password strength, plus a command-line tool to
run them over single values, records and CSV batches.
"""

__version__ = "0.1.0"
__author__ = "brcheck contributors"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]

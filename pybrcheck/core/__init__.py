"""Core components for the pybrcheck application.

This package contains the fundamental building blocks of the validation
engine: the check digit arithmetic, the base classes shared by all
validators, the error hierarchy, the configuration manager and the record
orchestrator.
"""

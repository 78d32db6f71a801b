"""Handles the core validation pipeline for pybrcheck.

This module orchestrates record validation, which includes:
1.  Discovering all available `BaseValidator` implementations.
2.  Matching them against the fields present in a record.
3.  Running all enabled validators concurrently.
4.  Aggregating the results into a single report.

It also hosts `run_service`, a demonstration harness that composes the
validators the way an onboarding flow would: validate a contact, normalize
it, format the company CNPJ and produce a small exported batch with a
synthetic test record.
"""

import inspect
import json
import logging
import pkgutil
import random
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from .base_validator import BaseValidator
from .checksum import only_digits
from .config import Config
from .exceptions import BrcheckError
from .. import validators as validators_package

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

SERVICE_TEST_PASSWORD = "Teste#8264!"


def discover_validators() -> List[Type[BaseValidator]]:
    """Discovers all validator classes within the `pybrcheck.validators` package.

    This function iterates through the modules in the `validators` package,
    inspects their members, and collects the classes defined there that are
    subclasses of `BaseValidator`. Base classes imported into a module are
    skipped.

    Returns:
        List[Type[BaseValidator]]: The discovered validator classes, sorted
        by name.
    """
    validators = []
    for _, name, _ in pkgutil.iter_modules(validators_package.__path__):
        try:
            module = __import__(f"{validators_package.__name__}.{name}", fromlist=["*"])
        except ImportError as e:
            logger.warning(f"Could not import validator module {name}: {e}")
            continue
        for _, item in inspect.getmembers(module, inspect.isclass):
            if issubclass(item, BaseValidator) and item.__module__ == module.__name__:
                validators.append(item)
    return sorted(validators, key=lambda v: v.name)


def resolve_document_field(document: str) -> str:
    """Tells whether a taxpayer number is a CPF or a CNPJ by its digit count.

    Anything that does not hold exactly 11 digits is treated as a CNPJ, so a
    malformed number is still reported by one of the two validators.
    """
    return "cpf" if len(only_digits(document)) == 11 else "cnpj"


def _run_validator(validator: BaseValidator, value: Any) -> Dict[str, Any]:
    """Runs one validator, turning caller misuse into a reported error.

    Args:
        validator (BaseValidator): The validator to run.
        value (Any): The record value for the validator's field.

    Returns:
        Dict[str, Any]: The validator result.
    """
    try:
        return validator.check(value)
    except BrcheckError as e:
        logger.debug(f"Validator {validator.name} rejected its input: {e}")
        return {
            "name": validator.name,
            "field": validator.field,
            "category": validator.category,
            "description": validator.description,
            "valid": False,
            "errors": [f"Validator {validator.name} failed: {e}"],
            "warnings": [],
            "info": {},
        }


def validate_record(record: Dict[str, Any], config: Optional[Config] = None) -> Dict[str, Any]:
    """Runs every enabled validator whose field appears in ``record``.

    Args:
        record (Dict[str, Any]): Field name to raw value, e.g.
            ``{"email": ..., "password": ..., "cnpj": ...}``.
        config (Optional[Config]): The application's configuration object.

    Returns:
        Dict[str, Any]: A dictionary with the checked fields, overall
        validity, aggregated errors and warnings, and the detailed
        per-validator results.
    """
    config = config if config is not None else Config.defaults()
    logger.info(f"Validating record with fields: {', '.join(sorted(record))}")

    enabled_validators = []
    for validator_cls in discover_validators():
        if validator_cls.field not in record:
            continue
        if not config.is_validator_enabled(validator_cls.name):
            logger.debug(f"Skipping disabled validator {validator_cls.name}.")
            continue
        enabled_validators.append(validator_cls(config))

    max_workers = max(1, config.get("max_workers", 4))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        validator_results = list(
            executor.map(lambda v: _run_validator(v, record[v.field]), enabled_validators)
        )

    aggregated_errors = [f"{res['name']}: {err}" for res in validator_results for err in res["errors"]]
    aggregated_warnings = [f"{res['name']}: {warn}" for res in validator_results for warn in res["warnings"]]

    return {
        "fields": sorted(res["field"] for res in validator_results),
        "valid": bool(validator_results) and not aggregated_errors,
        "errors": aggregated_errors,
        "warnings": aggregated_warnings,
        "validator_results": validator_results,
    }


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _validators(config: Config) -> Dict[str, BaseValidator]:
    return {cls.field: cls(config) for cls in discover_validators()}


def run_service(
    email: str,
    password: str,
    cnpj: str,
    config: Optional[Config] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Validates a company contact and builds a processing report.

    The email, password and CNPJ must all be valid; otherwise a failure
    result carrying the individual flags is returned. On success the report
    holds the normalized contact, the formatted CNPJ, a batch made of the
    input record plus a generated test record, and the batch exported as
    JSON.

    Args:
        email (str): Contact email address.
        password (str): Account password.
        cnpj (str): Company CNPJ, masked or not.
        config (Optional[Config]): The application's configuration object.
        rng (Optional[random.Random]): Random source for the test record.

    Returns:
        Dict[str, Any]: The service result.

    Raises:
        InvalidInputError: If ``password`` or ``cnpj`` is not a string.
    """
    config = config if config is not None else Config.defaults()
    validators = _validators(config)
    email_validator = validators["email"]
    cnpj_validator = validators["cnpj"]

    validation = {
        "email": email_validator.validate(email),
        "password": validators["password"].validate(password),
        "cnpj": cnpj_validator.validate(cnpj),
    }
    if not all(validation.values()):
        logger.warning(f"Service rejected invalid input: {validation}")
        return {
            "success": False,
            "message": "Invalid data",
            "timestamp": _timestamp(),
            "summary": {"total_processed": 0, "valid_records": 0, "invalid_records": 1},
            "data": {"validation": validation},
            "details": validation,
        }

    logger.info("Input accepted, building service report.")
    target_domain = config.get("service.domain", "empresa.com")
    normalized_email = email_validator.normalize(email)
    masked_cnpj = cnpj_validator.mask(cnpj)
    processed = {
        "normalized_email": normalized_email,
        "domain": email_validator.extract_domain(normalized_email),
        "is_from_specific_domain": email_validator.is_from_domain(normalized_email, target_domain),
        "masked_cnpj": masked_cnpj,
        "unmasked_cnpj": cnpj_validator.unmask(masked_cnpj),
        "cnpj_format_valid": cnpj_validator.is_valid_format(masked_cnpj),
    }

    source = rng or random
    test_record = {
        "email": f"teste.{source.randrange(100000)}@{target_domain}",
        "password": SERVICE_TEST_PASSWORD,
        "cnpj": cnpj_validator.generate(rng),
    }
    batch = []
    for record in ({"email": email, "password": password, "cnpj": cnpj}, test_record):
        batch.append({
            "email": record["email"],
            "cnpj": record["cnpj"],
            "is_valid": validate_record(record, config)["valid"],
        })

    content = json.dumps({"processed": processed, "batch": batch})
    valid_records = sum(1 for entry in batch if entry["is_valid"])
    summary = {
        "total_processed": len(batch),
        "valid_records": valid_records,
        "invalid_records": len(batch) - valid_records,
    }

    return {
        "success": True,
        "message": "Service completed successfully",
        "timestamp": _timestamp(),
        "summary": summary,
        "data": {
            "processed": processed,
            "validation": validation,
            "batch": batch,
            "exported": {"format": "json", "content": content, "size": len(content)},
            "test": {
                "test_cnpj": test_record["cnpj"],
                "test_email": test_record["email"],
                "test_password": test_record["password"],
            },
            "report": {
                "timestamp": _timestamp(),
                "total_records": summary["total_processed"],
                "valid_records": summary["valid_records"],
                "invalid_records": summary["invalid_records"],
                "domain": processed["domain"],
                "is_from_specific_domain": processed["is_from_specific_domain"],
            },
        },
    }

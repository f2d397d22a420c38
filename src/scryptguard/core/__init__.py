"""Core of scryptguard: guard, buffer lifecycle, error translation and the operation facade."""

from .exceptions import ErrorKind, ScryptError
from .guard import (
    CostParameters,
    ResourceBudget,
    ENCRYPT_DEFAULTS,
    DECRYPT_DEFAULTS,
    validate_derivation_params,
    validate_budget,
)
from .operations import encrypt, decrypt, hash

__all__ = [
    "ErrorKind",
    "ScryptError",
    "CostParameters",
    "ResourceBudget",
    "ENCRYPT_DEFAULTS",
    "DECRYPT_DEFAULTS",
    "validate_derivation_params",
    "validate_budget",
    "encrypt",
    "decrypt",
    "hash",
]

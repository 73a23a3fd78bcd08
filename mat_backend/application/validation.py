"""Validations communes aux creations de compte initiees par un administrateur."""

import re
from typing import Dict, Optional

from mat_backend.domain.exceptions import (
    InvalidEmailFormat,
    MissingRequiredField,
    PasswordTooShort,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_fields(values: Dict[str, Optional[str]]) -> None:
    """Leve MissingRequiredField avec tous les champs vides (ordre conserve)."""
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise MissingRequiredField(missing)


def validate_credentials(email: str, password: str, min_length: int) -> str:
    """
    Verifie le format de l'email et la longueur du mot de passe.

    Returns:
        L'email normalise (espaces retires, minuscules)
    """
    normalized = email.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise InvalidEmailFormat(email)
    if len(password) < min_length:
        raise PasswordTooShort(min_length)
    return normalized

"""Traduction des exceptions domain en HTTPException."""

from typing import Dict, Tuple, Type

from fastapi import HTTPException, status

from mat_backend.domain.exceptions import (
    ActivityNotFound,
    AppointmentNotFound,
    ClientNotFound,
    ClientNotSynced,
    CompanyNotFound,
    CrmApiError,
    DuplicateAccount,
    IntegrationNotActive,
    InvalidEmailFormat,
    InvalidTriggerPayload,
    MissingRequiredField,
    NoCalendarsFound,
    PasswordTooShort,
    SeatLimitReached,
    StepFailed,
    SubscriptionError,
    UserNotFound,
)

# Ordre significatif: la premiere classe correspondante l'emporte
STATUS_BY_EXCEPTION: Tuple[Tuple[Type[Exception], int], ...] = (
    (InvalidTriggerPayload, status.HTTP_400_BAD_REQUEST),
    (MissingRequiredField, status.HTTP_400_BAD_REQUEST),
    (InvalidEmailFormat, status.HTTP_400_BAD_REQUEST),
    (PasswordTooShort, status.HTTP_400_BAD_REQUEST),
    (SeatLimitReached, status.HTTP_400_BAD_REQUEST),
    (DuplicateAccount, status.HTTP_409_CONFLICT),
    (CompanyNotFound, status.HTTP_404_NOT_FOUND),
    (UserNotFound, status.HTTP_404_NOT_FOUND),
    (ClientNotFound, status.HTTP_404_NOT_FOUND),
    (ActivityNotFound, status.HTTP_404_NOT_FOUND),
    (AppointmentNotFound, status.HTTP_404_NOT_FOUND),
    (IntegrationNotActive, status.HTTP_404_NOT_FOUND),
    (ClientNotSynced, status.HTTP_409_CONFLICT),
    (NoCalendarsFound, status.HTTP_409_CONFLICT),
    (CrmApiError, status.HTTP_502_BAD_GATEWAY),
    (SubscriptionError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(error: Exception) -> HTTPException:
    """
    Construit la HTTPException correspondant a une erreur domain.

    Les StepFailed exposent l'etape en echec, la cause et les compensations
    executees. Toute erreur inconnue donne un 500.
    """
    if isinstance(error, StepFailed):
        detail: Dict = {
            "error": error.label,
            "details": error.cause,
            "compensations": error.compensations,
        }
        if error.compensation_failures:
            detail["compensationFailures"] = error.compensation_failures
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

    if isinstance(error, MissingRequiredField):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(error), "required": error.fields},
        )

    for exception_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(error, exception_type):
            return HTTPException(status_code=status_code, detail=str(error))

    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))

"""Exceptions domain pour le provisioning des comptes et la synchronisation CRM."""

from typing import Iterable, List, Optional


# --- Provisioning ---


class ProvisioningError(Exception):
    """Erreur de base du workflow de provisioning."""


class InvalidTriggerPayload(ProvisioningError):
    """Le payload declencheur est invalide ou non verifie."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Payload invalide: {reason}")


class MissingRequiredField(ProvisioningError):
    """Un ou plusieurs champs obligatoires sont absents."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class InvalidEmailFormat(ProvisioningError):
    """L'email fourni n'a pas un format valide."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Invalid email format")


class PasswordTooShort(ProvisioningError):
    """Le mot de passe est trop court."""

    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(f"Password must be at least {min_length} characters")


class DuplicateAccount(ProvisioningError):
    """Un compte existe deja pour cet email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already exists: {email}")


class CompanyNotFound(ProvisioningError):
    """L'entreprise demandee n'existe pas."""

    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"Company not found: {company_id}")


class SeatLimitReached(ProvisioningError):
    """L'entreprise a atteint son nombre maximum d'utilisateurs."""

    def __init__(self, max_users: int):
        self.max_users = max_users
        super().__init__(f"Company has reached maximum users ({max_users})")


class UserNotFound(ProvisioningError):
    """L'utilisateur demande n'existe pas."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class StepFailed(ProvisioningError):
    """
    Echec d'une etape apres compensation.

    Attributes:
        cause: message de l'erreur d'origine (fournisseur ou base)
        compensations: noms des compensations executees, dans l'ordre
        compensation_failures: compensations qui ont elles-memes echoue
    """

    label = "Step failed"

    def __init__(
        self,
        cause: str,
        compensations: Optional[List[str]] = None,
        compensation_failures: Optional[List[str]] = None,
    ):
        self.cause = cause
        self.compensations = compensations or []
        self.compensation_failures = compensation_failures or []
        super().__init__(f"{self.label}: {cause}")


class IdentityCreationFailed(StepFailed):
    label = "Failed to create authentication user"


class CompanyCreationFailed(StepFailed):
    label = "Failed to create company"


class UserRecordCreationFailed(StepFailed):
    label = "Failed to create user record"


class UserDeletionFailed(StepFailed):
    label = "Failed to delete user"


# --- Synchronisation CRM ---


class SyncError(Exception):
    """Erreur de base de la synchronisation GoHighLevel."""


class IntegrationNotActive(SyncError):
    """Aucune integration GoHighLevel active pour l'entreprise."""

    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"GHL integration not found or inactive for company {company_id}")


class ClientNotFound(SyncError):
    def __init__(self, client_id: str):
        self.client_id = client_id
        super().__init__(f"Client not found: {client_id}")


class ClientNotSynced(SyncError):
    """Le client n'a pas encore de contact GoHighLevel associe."""

    def __init__(self, client_id: Optional[str]):
        self.client_id = client_id
        super().__init__("Client not synced to GHL")


class ActivityNotFound(SyncError):
    def __init__(self, activity_id: str):
        self.activity_id = activity_id
        super().__init__(f"Activity not found: {activity_id}")


class AppointmentNotFound(SyncError):
    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment not found: {appointment_id}")


class NoCalendarsFound(SyncError):
    def __init__(self):
        super().__init__("No calendars found in GHL")


class CrmApiError(SyncError):
    """Reponse non-2xx (ou erreur reseau) de l'API GoHighLevel."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"GHL API Error ({status_code}): {body}")


# --- Facturation ---


class SubscriptionError(Exception):
    """Erreur remontee par la passerelle de paiement."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code
        super().__init__(message)

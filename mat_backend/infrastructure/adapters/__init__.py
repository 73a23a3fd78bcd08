"""
Adapters - Implementations concretes des ports.

Les adapters font le pont entre les abstractions du domain
et les services externes (Supabase Auth, Stripe, GoHighLevel, Resend).
"""

from mat_backend.infrastructure.adapters.ghl_client import GhlClient, create_ghl_client
from mat_backend.infrastructure.adapters.http_notifier_adapter import HttpNotifierAdapter
from mat_backend.infrastructure.adapters.stripe_gateway_adapter import StripeGatewayAdapter
from mat_backend.infrastructure.adapters.supabase_identity_adapter import (
    SupabaseAdminError,
    SupabaseIdentityAdapter,
)

__all__ = [
    "GhlClient",
    "HttpNotifierAdapter",
    "StripeGatewayAdapter",
    "SupabaseAdminError",
    "SupabaseIdentityAdapter",
    "create_ghl_client",
]

# 📄 File: plantid/modules/subscription_management/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Wires together the pieces each subscription endpoint needs: the database, the quota rules and Stripe.
# 🧪 Purpose (Technical Summary):
# Module-specific FastAPI dependency providers for the usage repository, quota policy, usage service,
# Stripe gateway and CQRS handlers. Tests replace them through app.dependency_overrides.
# 🔗 Dependencies:
# FastAPI Depends, SQLAlchemy AsyncSession, plantid.shared.core.dependencies
# 🔄 Connected Modules / Calls From:
# subscription_management.presentation.api.v1.*, plant_identification.presentation.dependencies

"""
Subscription Management Module Dependencies

Provider chain:
    get_db -> get_usage_repository --+
                                     +-> get_usage_service -> handlers
    get_app_settings -> get_quota_service
    get_app_settings -> get_stripe_gateway --------------------> handlers
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from plantid.modules.subscription_management.application.handlers.command_handlers import (
    CancelSubscriptionCommandHandler,
    ConfirmSubscriptionCommandHandler,
    CreateSubscriptionCommandHandler,
    ProcessStripeWebhookCommandHandler,
)
from plantid.modules.subscription_management.application.handlers.query_handlers import GetUsageQueryHandler
from plantid.modules.subscription_management.domain.repositories.user_usage_repository import UserUsageRepository
from plantid.modules.subscription_management.domain.services.quota_service import QuotaPolicy, QuotaService
from plantid.modules.subscription_management.domain.services.usage_service import UsageService
from plantid.modules.subscription_management.infrastructure.database.user_usage_repository_impl import (
    UserUsageRepositoryImpl,
)
from plantid.modules.subscription_management.infrastructure.external.stripe_gateway import StripeGateway
from plantid.shared.config.settings import Settings
from plantid.shared.core.dependencies import get_app_settings, get_db


# =========================================================================
# DOMAIN
# =========================================================================

def get_usage_repository(db: AsyncSession = Depends(get_db)) -> UserUsageRepository:
    return UserUsageRepositoryImpl(db)


def get_quota_service(settings: Settings = Depends(get_app_settings)) -> QuotaService:
    return QuotaService(QuotaPolicy.from_settings(settings))


def get_usage_service(
    repository: UserUsageRepository = Depends(get_usage_repository),
    quota_service: QuotaService = Depends(get_quota_service),
) -> UsageService:
    return UsageService(repository, quota_service)


# =========================================================================
# INFRASTRUCTURE
# =========================================================================

def get_stripe_gateway(settings: Settings = Depends(get_app_settings)) -> StripeGateway:
    return StripeGateway(settings)


# =========================================================================
# HANDLERS
# =========================================================================

def get_usage_query_handler(
    usage_service: UsageService = Depends(get_usage_service),
) -> GetUsageQueryHandler:
    return GetUsageQueryHandler(usage_service)


def get_create_subscription_handler(
    usage_service: UsageService = Depends(get_usage_service),
    gateway: StripeGateway = Depends(get_stripe_gateway),
) -> CreateSubscriptionCommandHandler:
    return CreateSubscriptionCommandHandler(usage_service, gateway)


def get_confirm_subscription_handler(
    usage_service: UsageService = Depends(get_usage_service),
    gateway: StripeGateway = Depends(get_stripe_gateway),
) -> ConfirmSubscriptionCommandHandler:
    return ConfirmSubscriptionCommandHandler(usage_service, gateway)


def get_cancel_subscription_handler(
    usage_service: UsageService = Depends(get_usage_service),
    gateway: StripeGateway = Depends(get_stripe_gateway),
) -> CancelSubscriptionCommandHandler:
    return CancelSubscriptionCommandHandler(usage_service, gateway)


def get_stripe_webhook_handler(
    usage_service: UsageService = Depends(get_usage_service),
    gateway: StripeGateway = Depends(get_stripe_gateway),
) -> ProcessStripeWebhookCommandHandler:
    return ProcessStripeWebhookCommandHandler(usage_service, gateway)

# 📄 File: plantid/modules/subscription_management/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# This file defines how each user's usage counters and subscription details are stored in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the user_usage table, mapping the UserUsage domain entity to a flat
# row keyed by an auto-incrementing integer id with a unique user_id.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - plantid.shared.infrastructure.database.connection (declarative Base)
#
# 🔄 Connected Modules / Calls From:
# - user_usage_repository_impl.py (CRUD operations)
# - DatabaseConnectionManager.create_tables (schema creation)

"""
SQLAlchemy Models for Subscription Management

Models:
- UserUsageModel: usage counters, trial window and Stripe linkage per user
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from plantid.shared.infrastructure.database.connection import Base


# =============================================================================
# USER USAGE MODEL
# =============================================================================

class UserUsageModel(Base):
    """
    SQLAlchemy model for per-user usage quotas and subscription linkage.
    """
    __tablename__ = "user_usage"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False, unique=True, index=True)

    # Counters
    daily_count = Column(Integer, nullable=False, default=0)
    last_reset_date = Column(String(10), nullable=False)
    total_count = Column(Integer, nullable=False, default=0)

    # Premium
    is_premium = Column(Boolean, nullable=False, default=False)
    premium_monthly_count = Column(Integer, nullable=False, default=0)
    premium_period = Column(String(7), nullable=True)
    premium_expires_at = Column(DateTime(timezone=True), nullable=True)

    # Trial
    trial_start_date = Column(String(10), nullable=True)
    trial_expired = Column(Boolean, nullable=False, default=False)

    # Stripe
    stripe_customer_id = Column(String(255), nullable=True, index=True)
    stripe_subscription_id = Column(String(255), nullable=True, index=True)
    subscription_status = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<UserUsageModel(user_id={self.user_id}, daily={self.daily_count}, premium={self.is_premium})>"

# 📄 File: plantid/modules/plant_identification/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# This file defines how each plant identification result is stored in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the plant_identifications table (flat rows, auto-increment id,
# user_id index for history lookups).
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - plantid.shared.infrastructure.database.connection (declarative Base)
#
# 🔄 Connected Modules / Calls From:
# - plant_identification_repository_impl.py
# - DatabaseConnectionManager.create_tables

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from plantid.shared.infrastructure.database.connection import Base


class PlantIdentificationModel(Base):
    """
    SQLAlchemy model for identification results.
    """
    __tablename__ = "plant_identifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False, index=True)

    # Submitted photo as a data URL
    image_url = Column(Text, nullable=False)

    scientific_name = Column(String(255), nullable=False)
    common_name = Column(String(255), nullable=True)
    confidence = Column(Integer, nullable=False)
    family = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    origin = Column(String(255), nullable=True)
    type = Column(String(255), nullable=True)
    provider = Column(String(50), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_plant_identifications_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PlantIdentificationModel(id={self.id}, user_id={self.user_id}, name={self.scientific_name})>"

# models/tenant.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Tenant(Base):
     """
     Tenant model - extended profile for users with role='tenant'.
     Maps to existing 'tenants' table in the database.
     """
     __tablename__ = "tenants"

     tenant_id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

     # Contact info used for reminders
     first_name = Column(String(100), nullable=True)
     last_name = Column(String(100), nullable=True)
     email = Column(String(255), nullable=False)
     contact_number = Column(String(50), nullable=True)

     # Status
     status = Column(String(50), default="pending", nullable=False)  # pending, approved, denied

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     user = relationship("User", back_populates="tenant")
     leases = relationship("Lease", back_populates="tenant")

     @property
     def display_name(self) -> str:
          """Full name, or 'Tenant' when the profile has no name on file."""
          name = f"{self.first_name or ''} {self.last_name or ''}".strip()
          return name or "Tenant"

     def __repr__(self):
          return f"<Tenant(tenant_id={self.tenant_id}, name='{self.display_name}')>"

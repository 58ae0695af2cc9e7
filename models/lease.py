# models/lease.py
import enum
from sqlalchemy import Column, Integer, Date, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class LeaseStatus(str, enum.Enum):
     """Lease lifecycle. Only ACTIVE leases are evaluated by the scheduler."""
     DRAFT = "draft"
     PENDING = "pending"
     ACTIVE = "active"
     EXPIRED = "expired"
     TERMINATED = "terminated"
     RENEWED = "renewed"


class Lease(Base):
     """
     Lease model - rental agreements between tenants and properties/units.
     Maps to existing 'leases' table in the database.

     All money columns are stored in cents.
     """
     __tablename__ = "leases"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
     property_unit_id = Column(Integer, ForeignKey("property_units.id"), nullable=True)
     tenant_id = Column(Integer, ForeignKey("tenants.tenant_id"), nullable=False)

     status = Column(
          Enum(LeaseStatus, name="lease_status", values_callable=lambda e: [m.value for m in e]),
          default=LeaseStatus.DRAFT,
          nullable=False,
          index=True
     )

     # Pricing (cents)
     monthly_rent = Column(Integer, nullable=False)
     security_deposit = Column(Integer, nullable=True)

     # Late fee policy
     late_fee_amount = Column(Integer, nullable=True)
     late_fee_grace_days = Column(Integer, default=5, nullable=True)

     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False, index=True)

     # Terms
     tenancy_terms = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="leases")
     property_unit = relationship("PropertyUnit", back_populates="leases")
     tenant = relationship("Tenant", back_populates="leases")
     rent_payments = relationship("RentPayment", back_populates="lease", cascade="all, delete-orphan")
     charges = relationship("LeaseCharge", back_populates="lease", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, status='{self.status.value}')>"

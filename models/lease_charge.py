# models/lease_charge.py
"""
LeaseCharge model - recurring per-lease charges (utilities, parking, fees).

Owned by the billing subsystem; the scheduler only reads active charges to
show a breakdown in rent reminders.
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class ChargeCategory(str, enum.Enum):
     RENT = "rent"
     WATER_TRASH = "water_trash"
     ELECTRICITY = "electricity"
     GAS = "gas"
     INTERNET = "internet"
     PARKING = "parking"
     PET_FEE = "pet_fee"
     OTHER = "other"


class ChargeAmountType(str, enum.Enum):
     FIXED = "fixed"  # same every month
     VARIABLE = "variable"  # entered per period; estimated_amount is the default


class LeaseCharge(Base):
     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     category = Column(
          Enum(ChargeCategory, name="lease_charge_category", values_callable=lambda e: [m.value for m in e]),
          nullable=False
     )
     name = Column(String(255), nullable=False)  # e.g. "Water & Trash"

     amount_type = Column(
          Enum(ChargeAmountType, name="lease_charge_amount_type", values_callable=lambda e: [m.value for m in e]),
          default=ChargeAmountType.FIXED,
          nullable=False
     )
     fixed_amount = Column(Integer, nullable=True)  # cents
     estimated_amount = Column(Integer, nullable=True)  # cents

     is_active = Column(Boolean, default=True, nullable=False)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     lease = relationship("Lease", back_populates="charges")

     def __repr__(self):
          return f"<LeaseCharge(id={self.id}, lease_id={self.lease_id}, name='{self.name}')>"

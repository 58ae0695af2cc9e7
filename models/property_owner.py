# models/property_owner.py
"""
PropertyOwner model - links users with role 'owner' to their owner profile.
Owners of a property receive lease-expiry notices alongside the tenant.
"""
from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class PropertyOwner(Base):
     """
     Property owner profile - maps to existing 'property_owners' table.
     """
     __tablename__ = "property_owners"

     owner_id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

     # Relationships
     user = relationship("User")
     properties = relationship("Property", back_populates="owner")

     def __repr__(self):
          return f"<PropertyOwner(owner_id={self.owner_id}, user_id={self.user_id})>"

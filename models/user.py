# models/user.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class User(Base):
     """
     User model - central account table.
     Owners and property managers are reached through their user row.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     phone = Column(String(50), nullable=True)
     role = Column(String(50), nullable=False)  # admin, manager, owner, tenant, agent
     is_active = Column(Boolean, default=True, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     tenant = relationship("Tenant", back_populates="user", uselist=False)

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}".strip()

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

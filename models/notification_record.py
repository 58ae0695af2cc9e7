# models/notification_record.py
"""
NotificationRecord model - dedup marker for scheduled notifications.

One row per (entity_id, kind, day) that has already fired. The unique
constraint is what makes "check then send" safe across re-runs and across
concurrent workers: the insert either succeeds (caller may send) or hits
the constraint (someone already did).
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, UniqueConstraint, func
from .base import Base


class NotificationRecord(Base):
     """
     Marker for a notification that was claimed for sending.
     Rows are only removed when the send they guarded failed.
     """
     __tablename__ = "notification_records"

     id = Column(Integer, primary_key=True, autoincrement=True)
     entity_id = Column(String(64), nullable=False, index=True)  # payment or lease id
     kind = Column(String(64), nullable=False)
     day = Column(Date, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     __table_args__ = (
          UniqueConstraint("entity_id", "kind", "day", name="uq_notification_records_entity_kind_day"),
     )

     def __repr__(self):
          return f"<NotificationRecord(entity_id={self.entity_id}, kind='{self.kind}', day={self.day})>"

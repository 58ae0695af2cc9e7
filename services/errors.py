# services/errors.py
"""
Error taxonomy for the rent ledger scheduler.

- LedgerDataError: one lease/payment is missing required fields; skip it.
- LedgerUnavailableError: the ledger store cannot be reached at the start of
  a tick; nothing can be evaluated, so the tick is aborted.

Transient per-entity I/O failures surface as SQLAlchemyError (store) or as a
failed SendResult (gateway) and are handled at the entity boundary.
"""


class LedgerError(Exception):
     """Base class for ledger scheduler errors."""


class LedgerDataError(LedgerError):
     """A ledger entity cannot be evaluated because of missing or invalid data."""

     def __init__(self, entity: str, entity_id, reason: str):
          self.entity = entity
          self.entity_id = entity_id
          self.reason = reason
          super().__init__(f"{entity} {entity_id}: {reason}")


class LedgerUnavailableError(LedgerError):
     """The ledger store could not be read."""

"""
Unit of Work Pattern

Manages database transactions and ensures that domain events
are published only after successful transaction commit.

Every public booking and wallet operation is exactly one unit of work:
either all of its writes commit, or none of them do.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import DatabaseError, transaction

from shared.domain.base import DomainEvent
from shared.domain.exceptions import StorageError

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def add_event(self, event: DomainEvent):
        """Queue an event for publication after commit"""
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps transaction.atomic(). Nested units of work become savepoints,
    so an operation that calls another operation (confirming a booking
    debits a wallet) still commits or rolls back as a whole.

    Database failures escaping the block are rolled back and re-raised
    as StorageError; domain errors pass through untouched.

    Usage:
        with DjangoUnitOfWork() as uow:
            wallet = Wallet.objects.select_for_update().get(user_id=user_id)
            ...
            uow.add_event(WalletTransactionRecorded(...))
        # Events are published after commit
    """

    def __init__(self, using=None):
        self.using = using
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic(using=self.using)
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            try:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)
            except DatabaseError as exc:
                logger.error(f"Transaction commit failed: {exc}", exc_info=True)
                raise StorageError(str(exc)) from exc

        if exc_type is not None and issubclass(exc_type, DatabaseError):
            logger.error(f"Database error inside unit of work, rolled back: {exc_val}")
            raise StorageError(str(exc_val)) from exc_val
        return False

    def commit(self):
        """
        Schedule event publishing

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self.using)

    def rollback(self):
        """Discard events; the atomic block rolls the writes back"""
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def add_event(self, event: DomainEvent):
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")

        try:
            message_bus.publish_events(events)
        except Exception as e:
            # Writes are already committed; a failed notification must not surface
            logger.error(f"Error publishing events: {e}", exc_info=True)

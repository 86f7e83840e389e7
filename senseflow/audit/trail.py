"""
Audit Trail Storage

DESIGN DECISION: The trail is an abstract interface with one in-memory
implementation. Events live for the session only.

The trail is append-only: events are never edited. The in-memory trail
keeps the most recent events up to a fixed size.
"""

from abc import ABC, abstractmethod
from collections import deque
from uuid import UUID

from senseflow.models.audit import AuditEvent, AuditEventType


class AuditTrailInterface(ABC):
    """
    Abstract interface for audit event storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the trail.

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (one user action).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class InMemoryAuditTrail(AuditTrailInterface):
    """Bounded in-memory trail. The oldest events drop off first."""

    def __init__(self, max_events: int = 200):
        if max_events < 1:
            raise ValueError(f"max_events must be positive, got {max_events}")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    @property
    def max_events(self) -> int:
        return self._events.maxlen

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit <= 0:
            return []
        return list(reversed(self._events))[:limit]

    def get_events_by_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        """Events of one type in chronological order."""
        return [e for e in self._events if e.event_type == event_type]

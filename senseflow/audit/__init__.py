"""Audit logging package."""

from senseflow.audit.logger import AuditLogger, configure_logging, create_correlation_id
from senseflow.audit.trail import AuditTrailInterface, InMemoryAuditTrail

__all__ = [
    "AuditLogger",
    "AuditTrailInterface",
    "InMemoryAuditTrail",
    "configure_logging",
    "create_correlation_id",
]

"""
Audit Models for Expense Mascots

Every significant step of the preference engine is logged:
loading, falling back to defaults, accepted and rejected mutations,
saves and resets. This provides:
1. Traceability of what a user's navigation bar should be showing
2. Debugging information when the store misbehaves
3. A record of silent recoveries (the user never sees those)

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Bootstrap / reconciliation
    PREFERENCES_LOADED = "preferences_loaded"
    PREFERENCES_FALLBACK = "preferences_fallback"

    # Interactive mutation
    SELECTION_CHANGED = "selection_changed"
    SELECTION_REJECTED = "selection_rejected"

    # Persistence
    PREFERENCES_SAVED = "preferences_saved"
    PREFERENCES_SAVE_FAILED = "preferences_save_failed"
    PREFERENCES_RESET = "preferences_reset"

    # System events
    STORE_ERROR = "store_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - whose preference is this about?
    user_id: Optional[str] = Field(
        default=None,
        description="User the event relates to (None for anonymous sessions)"
    )
    preference_kind: Optional[str] = Field(
        default=None,
        description="Preference record kind"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "preference_kind": self.preference_kind,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.preferences_loaded(user_id, kind, 7)
        event = AuditEventBuilder.selection_changed(user_id, "select", path, 8)
    """

    @staticmethod
    def preferences_loaded(
        user_id: Optional[str],
        preference_kind: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_LOADED,
            user_id=user_id,
            preference_kind=preference_kind,
            description=f"Loaded {count} stored selections",
            details={"count": count},
        )

    @staticmethod
    def preferences_fallback(
        user_id: Optional[str],
        preference_kind: str,
        reason: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_FALLBACK,
            # An anonymous or first-time user is the normal case
            severity=(
                AuditSeverity.INFO
                if reason in ("anonymous", "no_record")
                else AuditSeverity.WARNING
            ),
            user_id=user_id,
            preference_kind=preference_kind,
            description=f"Using default selections: {reason}",
            details={"reason": reason, "count": count},
        )

    @staticmethod
    def selection_changed(
        user_id: Optional[str],
        operation: str,
        identifier: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SELECTION_CHANGED,
            user_id=user_id,
            description=f"Selection {operation}: {identifier}",
            details={
                "operation": operation,
                "identifier": identifier,
                "count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def selection_rejected(
        user_id: Optional[str],
        operation: str,
        identifier: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SELECTION_REJECTED,
            severity=AuditSeverity.DEBUG,
            user_id=user_id,
            description=f"Selection {operation} not applied: {identifier}",
            details={
                "operation": operation,
                "identifier": identifier,
                "count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def preferences_saved(
        user_id: str,
        preference_kind: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_SAVED,
            user_id=user_id,
            preference_kind=preference_kind,
            description=f"Saved {count} selections",
            details={"count": count},
        )

    @staticmethod
    def preferences_save_failed(
        user_id: Optional[str],
        preference_kind: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            preference_kind=preference_kind,
            description="Failed to save selections",
            error_message=error_message,
        )

    @staticmethod
    def preferences_reset(
        user_id: str,
        preference_kind: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_RESET,
            user_id=user_id,
            preference_kind=preference_kind,
            description="Preferences reset to defaults",
            is_user_action=True,
        )

    @staticmethod
    def store_error(
        user_id: Optional[str],
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_ERROR,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description=f"Preference store error during {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

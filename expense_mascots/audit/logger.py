"""
Audit Logger

DESIGN DECISION: Every significant action of the preference engine is
logged. Most recoveries (store down, corrupt record, stale identifiers)
are invisible to the user on purpose, so the log is the only place
they show up.

The audit logger:
- Is synchronous, so interactive mutations can log without awaiting
- Never raises into the caller
- Logs at the event's severity
"""

import structlog

from expense_mascots.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Writes structured events through structlog. Keeps the last events in
    memory so the settings page can show what happened this session.
    """

    def __init__(self, history_size: int = 100):
        self._logger = structlog.get_logger("expense_mascots.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, newest last."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its severity."""
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

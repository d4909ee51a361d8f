"""Audit logging package."""

from expense_mascots.audit.logger import AuditLogger

__all__ = ["AuditLogger"]

"""
modules/observability package: audit trail of program generation and edits.
"""
from modules.observability.logger import AuditLogger

__all__ = ["AuditLogger"]

from staysync.models.audit.audit_log import AuditLog

__all__ = ["AuditLog"]

from staysync.services.audit.audit_service import AuditContext, AuditService, diff_changes

__all__ = ["AuditService", "AuditContext", "diff_changes"]

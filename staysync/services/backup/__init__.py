from staysync.services.backup.backup_service import BACKUP_TABLES, BACKUP_VERSION, BackupService, validate_backup

__all__ = ["BackupService", "BACKUP_TABLES", "BACKUP_VERSION", "validate_backup"]

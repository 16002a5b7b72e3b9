"""landdesk Domain Backup -- tenant data export and scheduled backups."""

from landdesk.domain.backup.service import BACKUP_TABLES, BackupType, export_backup

__all__ = ["BACKUP_TABLES", "BackupType", "export_backup"]

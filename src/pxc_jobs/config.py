from __future__ import annotations

from dataclasses import dataclass
import os

BACKUP_BACKOFF_LIMIT = 4
USERS_BACKOFF_LIMIT = 1


@dataclass(frozen=True)
class JobBuilderConfig:
    backup_image: str = os.getenv("PXC_JOBS_BACKUP_IMAGE", "perconalab/backupjob-openshift")
    backup_command: tuple[str, ...] = ("bash", "/usr/bin/backup.sh")
    backup_container_name: str = "xtrabackup"
    backup_mount_path: str = "/backup"
    backup_backoff_limit: int = BACKUP_BACKOFF_LIMIT
    # Shared with the claim provisioning in backup.build_backup_volume_claim.
    volume_name_postfix: str = os.getenv("PXC_JOBS_VOLUME_NAME_POSTFIX", "-xtrabackup")
    users_image: str = os.getenv("PXC_JOBS_USERS_IMAGE", "nonemax/users:latest")
    users_container_name: str = "pxcusers"
    users_secret_name: str = os.getenv("PXC_JOBS_USERS_SECRET_NAME", "secret-for-users")
    users_secret_volume_name: str = "userssecret"
    users_mount_path: str = "/go/src/github.com/percona/pxcusers"
    users_backoff_limit: int = USERS_BACKOFF_LIMIT


DEFAULT_CONFIG = JobBuilderConfig()

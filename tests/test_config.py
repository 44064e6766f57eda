from __future__ import annotations

import importlib
from typing import Iterator

import pytest

from pxc_jobs import config as config_module


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    yield monkeypatch
    monkeypatch.undo()
    importlib.reload(config_module)


def test_job_builder_config_with_defaults_matches_fixed_constants() -> None:
    config = config_module.JobBuilderConfig()

    assert config.backup_image == "perconalab/backupjob-openshift"
    assert config.backup_command == ("bash", "/usr/bin/backup.sh")
    assert config.backup_mount_path == "/backup"
    assert config.backup_backoff_limit == 4
    assert config.volume_name_postfix == "-xtrabackup"
    assert config.users_image == "nonemax/users:latest"
    assert config.users_secret_name == "secret-for-users"
    assert config.users_backoff_limit == 1


def test_job_builder_config_with_env_overrides_uses_environment(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.setenv("PXC_JOBS_BACKUP_IMAGE", "registry.local/backup:1.0")
    reload_config.setenv("PXC_JOBS_VOLUME_NAME_POSTFIX", "-xb")
    reload_config.setenv("PXC_JOBS_USERS_SECRET_NAME", "pxc-users")

    reloaded = importlib.reload(config_module)

    assert reloaded.DEFAULT_CONFIG.backup_image == "registry.local/backup:1.0"
    assert reloaded.DEFAULT_CONFIG.volume_name_postfix == "-xb"
    assert reloaded.DEFAULT_CONFIG.users_secret_name == "pxc-users"


def test_job_builder_config_with_frozen_dataclass_rejects_mutation() -> None:
    config = config_module.JobBuilderConfig()

    with pytest.raises(AttributeError):
        config.backup_backoff_limit = 10  # type: ignore[misc]

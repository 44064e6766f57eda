from __future__ import annotations

import logging

from kubernetes import client

from .config import DEFAULT_CONFIG, JobBuilderConfig
from .models import BackupRequest, ensure_dns_label, ensure_job_name, ensure_resource_name_length

logger = logging.getLogger(__name__)


def backup_volume_name(request: BackupRequest) -> str:
    return f"{request.cluster_name}-backup-{request.backup_name}"


def backup_claim_name(request: BackupRequest, config: JobBuilderConfig | None = None) -> str:
    config = config or DEFAULT_CONFIG
    return f"{request.cluster_name}{config.volume_name_postfix}.{request.backup_name}"


def backup_job_name(request: BackupRequest) -> str:
    return f"{request.cluster_name}-xtrabackup-job.{request.backup_name}"


def backup_node_group(request: BackupRequest) -> str:
    return f"{request.cluster_name}-pxc-nodes"


def build_backup_job(request: BackupRequest, config: JobBuilderConfig | None = None) -> client.V1Job:
    """Build the XtraBackup job that snapshots a cluster into its backup claim.

    The job, volume and claim names are the identity contract shared with
    ``build_backup_volume_claim`` and any controller looking the objects up,
    so they are derived from the request alone.
    """
    config = config or DEFAULT_CONFIG
    job_name = ensure_job_name("backup job name", backup_job_name(request))
    volume = client.V1Volume(
        name=ensure_dns_label("backup volume name", backup_volume_name(request)),
        persistent_volume_claim=client.V1PersistentVolumeClaimVolumeSource(
            claim_name=ensure_resource_name_length("backup claim name", backup_claim_name(request, config)),
        ),
    )

    job = client.V1Job(
        api_version="batch/v1",
        kind="Job",
        metadata=client.V1ObjectMeta(name=job_name, namespace=request.namespace),
        spec=client.V1JobSpec(
            template=client.V1PodTemplateSpec(
                spec=client.V1PodSpec(
                    containers=[
                        client.V1Container(
                            name=config.backup_container_name,
                            image=config.backup_image,
                            command=list(config.backup_command),
                            volume_mounts=[
                                client.V1VolumeMount(name=volume.name, mount_path=config.backup_mount_path)
                            ],
                            env=[client.V1EnvVar(name="NODE_NAME", value=backup_node_group(request))],
                        )
                    ],
                    restart_policy="Never",
                    volumes=[volume],
                ),
            ),
            backoff_limit=config.backup_backoff_limit,
        ),
    )
    logger.debug("Built backup job %s/%s for cluster %s", request.namespace, job_name, request.cluster_name)
    return job


def build_backup_volume_claim(
    request: BackupRequest,
    *,
    storage_size: str,
    storage_class: str | None = None,
    config: JobBuilderConfig | None = None,
) -> client.V1PersistentVolumeClaim:
    if not storage_size.strip():
        raise ValueError("storage_size must not be empty")

    claim_name = ensure_resource_name_length("backup claim name", backup_claim_name(request, config))
    claim = client.V1PersistentVolumeClaim(
        api_version="v1",
        kind="PersistentVolumeClaim",
        metadata=client.V1ObjectMeta(name=claim_name, namespace=request.namespace),
        spec=client.V1PersistentVolumeClaimSpec(
            access_modes=["ReadWriteOnce"],
            storage_class_name=storage_class,
            resources=client.V1VolumeResourceRequirements(requests={"storage": storage_size}),
        ),
    )
    logger.debug("Built backup claim %s/%s (%s)", request.namespace, claim_name, storage_size)
    return claim

from __future__ import annotations

import logging

from kubernetes import client

from .config import DEFAULT_CONFIG, JobBuilderConfig
from .models import UsersCredentials, UsersRequest, ensure_job_name

logger = logging.getLogger(__name__)

USERS_JOB_TYPE_LABEL = "usermanager"


class JobDescriptorError(RuntimeError):
    """Raised when a job descriptor would be structurally invalid."""


def users_job_name(request: UsersRequest) -> str:
    return f"{request.cluster_name}-users-job.{request.request_id}"


def users_job_labels(request: UsersRequest) -> dict[str, str]:
    return {
        "type": USERS_JOB_TYPE_LABEL,
        "cluster": request.cluster_name,
        # Keeps manual selectors of jobs on the same cluster disjoint.
        "job-name": users_job_name(request),
    }


def build_users_job(request: UsersRequest) -> client.V1Job:
    job_name = ensure_job_name("users job name", users_job_name(request))
    job = client.V1Job(
        api_version="batch/v1",
        kind="Job",
        metadata=client.V1ObjectMeta(
            name=job_name,
            namespace=request.namespace,
            labels=users_job_labels(request),
        ),
    )
    logger.debug("Built users job shell %s/%s", request.namespace, job_name)
    return job


def build_users_job_spec(
    credentials: UsersCredentials,
    job: client.V1Job,
    config: JobBuilderConfig | None = None,
) -> client.V1JobSpec:
    """Build the pod template for a users job shell.

    Selector and template labels are copied from the shell so the job owns
    exactly the pods it creates. The root password travels as a plain env
    value; its confidentiality is left to how the cluster delivers pod env.
    """
    config = config or DEFAULT_CONFIG
    labels = dict(job.metadata.labels or {}) if job.metadata else {}
    selector = client.V1LabelSelector(match_labels=dict(labels))
    template_metadata = client.V1ObjectMeta(labels=dict(labels))
    _validate_selector(selector, template_metadata)

    return client.V1JobSpec(
        backoff_limit=config.users_backoff_limit,
        manual_selector=True,
        selector=selector,
        template=client.V1PodTemplateSpec(
            metadata=template_metadata,
            spec=client.V1PodSpec(
                restart_policy="Never",
                containers=[
                    client.V1Container(
                        name=config.users_container_name,
                        image=config.users_image,
                        image_pull_policy="Always",
                        volume_mounts=[
                            client.V1VolumeMount(
                                mount_path=config.users_mount_path,
                                name=config.users_secret_volume_name,
                                read_only=True,
                            )
                        ],
                        env=[
                            client.V1EnvVar(name="PXC_CONNS", value=credentials.connection_string),
                            client.V1EnvVar(name="PXC-ROOT-PASS", value=credentials.root_password),
                        ],
                    )
                ],
                volumes=[
                    client.V1Volume(
                        name=config.users_secret_volume_name,
                        secret=client.V1SecretVolumeSource(secret_name=config.users_secret_name),
                    )
                ],
            ),
        ),
    )


def build_users_job_descriptor(
    request: UsersRequest,
    credentials: UsersCredentials,
    config: JobBuilderConfig | None = None,
) -> client.V1Job:
    job = build_users_job(request)
    job.spec = build_users_job_spec(credentials, job, config)
    return job


def _validate_selector(selector: client.V1LabelSelector, template_metadata: client.V1ObjectMeta) -> None:
    match_labels = selector.match_labels or {}
    if not match_labels:
        raise JobDescriptorError(
            "users job selector is empty; the job shell must carry labels so its pods can be selected"
        )
    template_labels = template_metadata.labels or {}
    mismatched = sorted(key for key, value in match_labels.items() if template_labels.get(key) != value)
    if mismatched:
        raise JobDescriptorError(
            f"users job selector does not match template labels for keys: {', '.join(mismatched)}"
        )

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
from typing import NoReturn

from kubernetes import client, config
from kubernetes.client import ApiException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KubernetesClients:
    api_client: client.ApiClient
    core_api: client.CoreV1Api
    batch_api: client.BatchV1Api


class KubernetesAuthenticationError(RuntimeError):
    """Raised when Kubernetes authentication configuration fails."""


class JobSubmissionError(RuntimeError):
    """Raised when the API server rejects a job or persistent volume claim."""


class JobAlreadyExistsError(JobSubmissionError):
    """Raised when an object with the same name already exists in the namespace."""


def load_kubernetes_clients(
    *,
    kubeconfig_path: str | None = None,
    context: str | None = None,
    in_cluster: bool = False,
) -> KubernetesClients:
    """Load API clients for the account that submits jobs and backup claims.

    In-cluster loading is meant for a controller pod whose service account
    may create jobs; otherwise the kubeconfig file and context are used.
    """
    kubeconfig_file = _kubeconfig_file(kubeconfig_path)
    try:
        if in_cluster:
            config.load_incluster_config()
        else:
            config.load_kube_config(config_file=kubeconfig_file, context=context)
    except Exception as error:  # pylint: disable=broad-except
        raise KubernetesAuthenticationError(
            _credentials_error_message(in_cluster=in_cluster, kubeconfig_file=kubeconfig_file, context=context, error=error)
        ) from error

    api_client = client.ApiClient()
    return KubernetesClients(
        api_client=api_client,
        core_api=client.CoreV1Api(api_client),
        batch_api=client.BatchV1Api(api_client),
    )


def submit_job(clients: KubernetesClients, job: client.V1Job) -> client.V1Job:
    namespace, name = _object_identity(job)
    try:
        created = clients.batch_api.create_namespaced_job(namespace=namespace, body=job)
    except ApiException as error:
        _raise_submission_error(
            error,
            operation=f"create Job '{namespace}/{name}'",
            hint="Verify RBAC allows create on jobs.batch in this namespace.",
        )
    logger.info("Submitted Job %s/%s", namespace, name)
    return created


def submit_volume_claim(
    clients: KubernetesClients,
    claim: client.V1PersistentVolumeClaim,
) -> client.V1PersistentVolumeClaim:
    namespace, name = _object_identity(claim)
    try:
        created = clients.core_api.create_namespaced_persistent_volume_claim(namespace=namespace, body=claim)
    except ApiException as error:
        _raise_submission_error(
            error,
            operation=f"create PersistentVolumeClaim '{namespace}/{name}'",
            hint="Verify the storage class exists and RBAC allows create on persistentvolumeclaims.",
        )
    logger.info("Submitted PersistentVolumeClaim %s/%s", namespace, name)
    return created


def _raise_submission_error(error: ApiException, *, operation: str, hint: str) -> NoReturn:
    if error.status == 409:
        message = _format_api_exception_message(
            operation=operation,
            hint="An object with this name already exists; use a distinct backup name or request id.",
            error=error,
        )
        logger.error(message)
        raise JobAlreadyExistsError(message) from error

    message = _format_api_exception_message(operation=operation, hint=hint, error=error)
    logger.error(message)
    raise JobSubmissionError(message) from error


def _object_identity(obj: client.V1Job | client.V1PersistentVolumeClaim) -> tuple[str, str]:
    metadata = obj.metadata
    namespace = metadata.namespace if metadata else None
    name = metadata.name if metadata else None
    if not namespace or not name:
        raise JobSubmissionError(f"{obj.kind or 'object'} is missing metadata.namespace or metadata.name")
    return namespace, name


def _format_api_exception_message(*, operation: str, hint: str, error: ApiException) -> str:
    status = error.status if error.status is not None else "unknown"
    reason = error.reason or "no reason provided"
    return f"Kubernetes submission failed while trying to {operation}: API status {status} ({reason}). {hint}"


def _kubeconfig_file(kubeconfig_path: str | None) -> str | None:
    if not kubeconfig_path or not kubeconfig_path.strip():
        return None
    return str(Path(kubeconfig_path.strip()).expanduser())


def _credentials_error_message(
    *,
    in_cluster: bool,
    kubeconfig_file: str | None,
    context: str | None,
    error: Exception,
) -> str:
    reason = str(error).strip() or error.__class__.__name__
    if in_cluster:
        source = "the pod service account"
        hint = "Run the submitter in a pod whose service account token is mounted and may create jobs.batch."
    else:
        source = f"kubeconfig '{kubeconfig_file or '~/.kube/config'}'"
        if context:
            source = f"{source} (context '{context}')"
        hint = "Point kubeconfig_path and context at the cluster that runs the database."
    return f"Cannot load credentials for job submission from {source}: {reason}. {hint}"

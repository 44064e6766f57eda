from __future__ import annotations

from dataclasses import dataclass, field
import re

MAX_RESOURCE_NAME_LENGTH = 253
# Job names are copied into the job-name pod label, so they share the label value limit.
MAX_JOB_NAME_LENGTH = 63
MAX_DNS_LABEL_LENGTH = 63
_RFC1123_SUBDOMAIN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
_RFC1123_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


class InvalidRequestError(ValueError):
    """Raised when a job request cannot produce a well-formed descriptor."""

    def __init__(self, *, field_name: str, reason: str) -> None:
        super().__init__(f"invalid {field_name}: {reason}")
        self.field_name = field_name


@dataclass(frozen=True)
class ClusterIdentity:
    name: str
    namespace: str

    def __post_init__(self) -> None:
        _require_resource_name("cluster name", self.name)
        _require_resource_name("namespace", self.namespace)


@dataclass(frozen=True)
class BackupRequest:
    cluster_name: str
    backup_name: str
    namespace: str

    def __post_init__(self) -> None:
        _require_resource_name("cluster name", self.cluster_name)
        _require_resource_name("backup name", self.backup_name)
        _require_resource_name("namespace", self.namespace)

    @property
    def cluster(self) -> ClusterIdentity:
        return ClusterIdentity(name=self.cluster_name, namespace=self.namespace)


@dataclass(frozen=True)
class UsersRequest:
    cluster_name: str
    namespace: str
    request_id: str

    def __post_init__(self) -> None:
        _require_resource_name("cluster name", self.cluster_name)
        _require_resource_name("namespace", self.namespace)
        _require_resource_name("request id", self.request_id)

    @property
    def cluster(self) -> ClusterIdentity:
        return ClusterIdentity(name=self.cluster_name, namespace=self.namespace)


@dataclass(frozen=True)
class UsersCredentials:
    root_password: str = field(repr=False)
    connection_string: str

    def __post_init__(self) -> None:
        if not self.root_password:
            raise InvalidRequestError(field_name="root password", reason="must not be empty")
        if not self.connection_string.strip():
            raise InvalidRequestError(field_name="connection string", reason="must not be empty")


def ensure_resource_name_length(field_name: str, value: str, limit: int = MAX_RESOURCE_NAME_LENGTH) -> str:
    if len(value) > limit:
        raise InvalidRequestError(
            field_name=field_name,
            reason=f"'{value[:40]}...' is {len(value)} characters, limit is {limit}",
        )
    return value


def ensure_job_name(field_name: str, value: str) -> str:
    return ensure_resource_name_length(field_name, value, MAX_JOB_NAME_LENGTH)


def ensure_dns_label(field_name: str, value: str) -> str:
    if not _RFC1123_LABEL.match(value):
        raise InvalidRequestError(
            field_name=field_name,
            reason=(
                f"'{value}' must be a DNS label: lower case alphanumeric characters or '-', "
                "starting and ending with an alphanumeric character, without '.'"
            ),
        )
    return ensure_resource_name_length(field_name, value, MAX_DNS_LABEL_LENGTH)


def _require_resource_name(field_name: str, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(field_name=field_name, reason="must not be empty")
    if not _RFC1123_SUBDOMAIN.match(value):
        raise InvalidRequestError(
            field_name=field_name,
            reason=(
                f"'{value}' must consist of lower case alphanumeric characters, '-' or '.', "
                "and must start and end with an alphanumeric character"
            ),
        )
    ensure_resource_name_length(field_name, value)

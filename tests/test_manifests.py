from __future__ import annotations

import yaml

from pxc_jobs.backup import build_backup_job, build_backup_volume_claim
from pxc_jobs.manifests import render_yaml, to_manifest
from pxc_jobs.models import BackupRequest, UsersCredentials, UsersRequest
from pxc_jobs.users import build_users_job_descriptor


def _backup_request() -> BackupRequest:
    return BackupRequest(cluster_name="pxc1", backup_name="b1", namespace="databases")


def test_to_manifest_with_backup_job_uses_api_field_names() -> None:
    manifest = to_manifest(build_backup_job(_backup_request()))
    pod_spec = manifest["spec"]["template"]["spec"]

    assert manifest["apiVersion"] == "batch/v1"
    assert manifest["kind"] == "Job"
    assert manifest["metadata"] == {"name": "pxc1-xtrabackup-job.b1", "namespace": "databases"}
    assert manifest["spec"]["backoffLimit"] == 4
    assert pod_spec["restartPolicy"] == "Never"
    assert pod_spec["containers"][0]["volumeMounts"] == [{"mountPath": "/backup", "name": "pxc1-backup-b1"}]
    assert pod_spec["volumes"] == [
        {"name": "pxc1-backup-b1", "persistentVolumeClaim": {"claimName": "pxc1-xtrabackup.b1"}}
    ]


def test_to_manifest_with_users_job_keeps_selector_and_env_order() -> None:
    job = build_users_job_descriptor(
        UsersRequest(cluster_name="pxc1", namespace="databases", request_id="r1"),
        UsersCredentials(root_password="pw", connection_string="host:3306"),
    )

    manifest = to_manifest(job)
    container = manifest["spec"]["template"]["spec"]["containers"][0]

    assert manifest["spec"]["manualSelector"] is True
    labels = {"type": "usermanager", "cluster": "pxc1", "job-name": "pxc1-users-job.r1"}
    assert manifest["spec"]["selector"] == {"matchLabels": labels}
    assert manifest["spec"]["template"]["metadata"]["labels"] == labels
    assert container["imagePullPolicy"] == "Always"
    assert container["env"] == [
        {"name": "PXC_CONNS", "value": "host:3306"},
        {"name": "PXC-ROOT-PASS", "value": "pw"},
    ]


def test_render_yaml_with_claim_and_job_emits_documents_in_order() -> None:
    request = _backup_request()

    rendered = render_yaml(
        build_backup_volume_claim(request, storage_size="6Gi"),
        build_backup_job(request),
    )
    documents = list(yaml.safe_load_all(rendered))

    assert [document["kind"] for document in documents] == ["PersistentVolumeClaim", "Job"]
    assert documents[0]["metadata"]["name"] == "pxc1-xtrabackup.b1"
    assert documents[1]["spec"]["template"]["spec"]["containers"][0]["command"] == ["bash", "/usr/bin/backup.sh"]

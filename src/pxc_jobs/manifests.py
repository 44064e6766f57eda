from __future__ import annotations

from typing import Any

from kubernetes import client
import yaml


def to_manifest(obj: Any) -> dict[str, Any]:
    """Serialize a kubernetes model into the camelCase dict the API server accepts."""
    with client.ApiClient() as api_client:
        return api_client.sanitize_for_serialization(obj)


def render_yaml(*objects: Any) -> str:
    documents = [to_manifest(obj) for obj in objects]
    return yaml.safe_dump_all(documents, sort_keys=False, default_flow_style=False)

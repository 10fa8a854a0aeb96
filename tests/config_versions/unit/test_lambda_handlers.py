"""Lambda entry point wiring."""

from __future__ import annotations

import json
from typing import Any

import pytest
from tfc_run_worker.config_versions import lambda_handlers


class FakeAwsClient:
    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("update_item", kwargs))
        return {}

    def put_item(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(("put_item", kwargs))
        return {}

    def generate_presigned_url(self, operation: str, **kwargs: Any) -> str:
        self.calls.append((operation, kwargs))
        return "https://signed.example.invalid/upload"


@pytest.fixture
def aws_clients(monkeypatch: pytest.MonkeyPatch) -> dict[str, FakeAwsClient]:
    clients: dict[str, FakeAwsClient] = {}

    def _client(service_name: str, **_: Any) -> FakeAwsClient:
        return clients.setdefault(service_name, FakeAwsClient(service_name))

    monkeypatch.setattr(lambda_handlers.boto3, "client", _client)
    monkeypatch.setenv("CONFIG_VERSIONS_TABLE", "cv-table")
    monkeypatch.setenv("CONFIG_BUNDLE_BUCKET", "bundle-bucket")
    monkeypatch.delenv("UPLOAD_URL_LIFETIME_SECONDS", raising=False)
    return clients


def test_upload_handler_marks_version_uploaded(aws_clients: dict[str, FakeAwsClient]) -> None:
    event = {
        "Records": [
            {
                "s3": {
                    "bucket": {"name": "bundle-bucket"},
                    "object": {"key": "cv-abc123-1700000000000.tar.gz"},
                }
            }
        ]
    }

    response = lambda_handlers.upload_event_handler(event, None)

    assert response == {"updated": ["cv-abc123"]}
    operation, kwargs = aws_clients["dynamodb"].calls[0]
    assert operation == "update_item"
    assert kwargs["TableName"] == "cv-table"
    assert kwargs["Key"] == {"ID": {"S": "cv-abc123"}}


def test_create_handler_presigns_into_configured_bucket(
    aws_clients: dict[str, FakeAwsClient],
) -> None:
    body = json.dumps({"data": {"type": "configuration-versions"}})

    response = lambda_handlers.create_configuration_version_handler({"body": body}, None)

    assert response["statusCode"] == 200
    operation, kwargs = aws_clients["s3"].calls[0]
    assert operation == "put_object"
    assert kwargs["Params"]["Bucket"] == "bundle-bucket"
    assert kwargs["ExpiresIn"] == 900
    assert aws_clients["dynamodb"].calls[0][1]["TableName"] == "cv-table"


def test_create_handler_uses_configured_upload_url_lifetime(
    aws_clients: dict[str, FakeAwsClient], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("UPLOAD_URL_LIFETIME_SECONDS", "300")
    body = json.dumps({"data": {"type": "configuration-versions"}})

    response = lambda_handlers.create_configuration_version_handler({"body": body}, None)

    assert response["statusCode"] == 200
    assert aws_clients["s3"].calls[0][1]["ExpiresIn"] == 300


@pytest.mark.parametrize("raw", ["0", "fifteen"])
def test_create_handler_rejects_invalid_upload_url_lifetime(
    aws_clients: dict[str, FakeAwsClient], monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("UPLOAD_URL_LIFETIME_SECONDS", raw)
    body = json.dumps({"data": {"type": "configuration-versions"}})

    with pytest.raises(ValueError):
        lambda_handlers.create_configuration_version_handler({"body": body}, None)

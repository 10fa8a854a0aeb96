"""Configuration version creation tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import pytest
from botocore.exceptions import ClientError
from tfc_run_worker.config_versions import (
    ConfigurationVersion,
    ConfigurationVersionStoreError,
    ConfigVersionRequestError,
    PresignError,
    S3UploadPresigner,
    create_configuration_version,
    handle_create_request,
    parse_create_request,
)

CREATED_AT = datetime(2024, 10, 6, 20, 27, 5, tzinfo=UTC)


class FakePresigner:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str, int]] = []

    def presign_put(self, bucket: str, key: str, lifetime_seconds: int) -> str:
        self.calls.append((bucket, key, lifetime_seconds))
        if self.error:
            raise self.error
        return f"https://{bucket}.s3.example.invalid/{key}?signed"


class FakeStore:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.pending: list[ConfigurationVersion] = []

    def put_pending(self, version: ConfigurationVersion) -> None:
        if self.error:
            raise self.error
        self.pending.append(version)


def _body(attributes: dict[str, Any] | None = None) -> str:
    data: dict[str, Any] = {"type": "configuration-versions"}
    if attributes is not None:
        data["attributes"] = attributes
    return json.dumps({"data": data})


def test_auto_queue_runs_defaults_to_true() -> None:
    assert parse_create_request(_body()) is True
    assert parse_create_request(_body({"auto-queue-runs": False})) is False


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        json.dumps({"nothing": 1}),
        json.dumps({"data": {"type": "workspaces"}}),
        _body({"auto-queue-runs": "yes"}),
    ],
)
def test_invalid_create_requests_are_rejected(body: str) -> None:
    with pytest.raises(ConfigVersionRequestError):
        parse_create_request(body)


def test_create_stores_pending_version_with_presigned_upload_url() -> None:
    store = FakeStore()
    presigner = FakePresigner()

    version = create_configuration_version(
        _body({"auto-queue-runs": False}),
        store=store,
        presigner=presigner,
        bucket="tfc-configuration-files",
        now=lambda: CREATED_AT,
        id_factory=lambda: "cv-abc123",
    )

    assert presigner.calls == [
        ("tfc-configuration-files", "cv-abc123-1728246425000.tar.gz", 900)
    ]
    assert version.id == "cv-abc123"
    assert version.status.value == "pending"
    assert version.auto_queue_runs is False
    assert version.upload_url.endswith("cv-abc123-1728246425000.tar.gz?signed")
    assert store.pending == [version]


def test_handler_returns_jsonapi_document() -> None:
    response = handle_create_request(
        {"body": _body(), "requestContext": {"requestId": "req-1"}},
        store=FakeStore(),
        presigner=FakePresigner(),
        bucket="tfc-configuration-files",
    )

    assert response["statusCode"] == 200
    assert response["headers"] == {"Content-Type": "application/vnd.api+json"}
    document = json.loads(response["body"])
    assert document["data"]["type"] == "configuration-versions"
    assert document["data"]["id"].startswith("cv-")
    assert document["data"]["attributes"]["status"] == "pending"
    assert document["data"]["attributes"]["source"] == "tfe-api"
    assert document["data"]["attributes"]["auto-queue-runs"] is True


def test_handler_returns_400_for_bad_payload() -> None:
    response = handle_create_request(
        {"body": "{"}, store=FakeStore(), presigner=FakePresigner(), bucket="b"
    )

    assert response["statusCode"] == 400


@pytest.mark.parametrize(
    ("store", "presigner"),
    [
        (FakeStore(), FakePresigner(PresignError("no credentials"))),
        (FakeStore(ConfigurationVersionStoreError("table missing")), FakePresigner()),
    ],
)
def test_handler_returns_500_for_backend_failures(
    store: FakeStore, presigner: FakePresigner
) -> None:
    response = handle_create_request({"body": _body()}, store=store, presigner=presigner, bucket="b")

    assert response["statusCode"] == 500


def test_s3_presigner_wraps_client_errors() -> None:
    class FailingS3Client:
        def generate_presigned_url(self, *args: Any, **kwargs: Any) -> str:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "PutObject")

    with pytest.raises(PresignError, match="Couldn't get a presigned request"):
        S3UploadPresigner(FailingS3Client()).presign_put("b", "k", 60)


def test_s3_presigner_passes_lifetime() -> None:
    class RecordingS3Client:
        def __init__(self) -> None:
            self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

        def generate_presigned_url(self, *args: Any, **kwargs: Any) -> str:
            self.calls.append((args, kwargs))
            return "https://signed"

    client = RecordingS3Client()

    assert S3UploadPresigner(client).presign_put("b", "k", 900) == "https://signed"
    assert client.calls == [
        (("put_object",), {"Params": {"Bucket": "b", "Key": "k"}, "ExpiresIn": 900})
    ]

from __future__ import annotations

import pytest

from autovista.infra import config
from autovista.infra.db.config import database_url
from autovista.use_cases.submit_listing import UploadFailurePolicy


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "AUTOVISTA_MIN_IMAGES",
        "AUTOVISTA_UPLOAD_FAILURE_POLICY",
        "AUTOVISTA_LOG_LEVEL",
        "AUTOVISTA_BLOB_DIR",
    ):
        monkeypatch.delenv(name, raising=False)

    assert config.validation_policy().min_images == 1
    assert config.upload_failure_policy() is UploadFailurePolicy.SKIP_SLOT
    assert config.log_level() == "INFO"
    assert config.blob_storage_dir() == "./var/blobs"


def test_min_images_can_be_relaxed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOVISTA_MIN_IMAGES", "0")

    assert config.validation_policy().min_images == 0


@pytest.mark.parametrize("raw", ["2", "-1", "one"])
def test_invalid_min_images(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("AUTOVISTA_MIN_IMAGES", raw)

    with pytest.raises(RuntimeError, match="AUTOVISTA_MIN_IMAGES"):
        config.validation_policy()


def test_upload_failure_policy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOVISTA_UPLOAD_FAILURE_POLICY", "abort_all")

    assert config.upload_failure_policy() is UploadFailurePolicy.ABORT_ALL


def test_unknown_upload_failure_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOVISTA_UPLOAD_FAILURE_POLICY", "retry")

    with pytest.raises(RuntimeError, match="skip_slot, abort_all"):
        config.upload_failure_policy()


def test_log_level_is_upper_case(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOVISTA_LOG_LEVEL", "debug")

    assert config.log_level() == "DEBUG"


def test_database_url_is_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        database_url()


def test_database_url_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u:p@localhost/autovista")

    assert database_url() == "postgresql+psycopg://u:p@localhost/autovista"

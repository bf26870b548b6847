from __future__ import annotations

import os

from autovista.domain.validation import ValidationPolicy
from autovista.use_cases.submit_listing import UploadFailurePolicy


def blob_storage_dir() -> str:
    return os.getenv("AUTOVISTA_BLOB_DIR", "./var/blobs")


def blob_public_base_url() -> str:
    return os.getenv("AUTOVISTA_BLOB_BASE_URL", "http://localhost:8000/blobs")


def log_level() -> str:
    return os.getenv("AUTOVISTA_LOG_LEVEL", "INFO").upper()


def validation_policy() -> ValidationPolicy:
    raw = os.getenv("AUTOVISTA_MIN_IMAGES", "1")

    try:
        min_images = int(raw)
    except ValueError:
        raise RuntimeError(f"AUTOVISTA_MIN_IMAGES must be 0 or 1, got {raw!r}")
    if min_images not in (0, 1):
        raise RuntimeError(f"AUTOVISTA_MIN_IMAGES must be 0 or 1, got {raw!r}")

    return ValidationPolicy(min_images=min_images)


def upload_failure_policy() -> UploadFailurePolicy:
    raw = os.getenv("AUTOVISTA_UPLOAD_FAILURE_POLICY", UploadFailurePolicy.SKIP_SLOT.value)

    try:
        return UploadFailurePolicy(raw)
    except ValueError:
        allowed = ", ".join(policy.value for policy in UploadFailurePolicy)
        raise RuntimeError(f"AUTOVISTA_UPLOAD_FAILURE_POLICY must be one of: {allowed}")

"""Testes da credencial de tenant."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.domain.tenant import TenantCredential


def test_empty_tenant_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        TenantCredential(tenant_id="  ")


@pytest.mark.parametrize(
    ("private_key_pem", "app_secret"),
    [("pem", None), (None, "secret")],
)
def test_key_and_secret_must_be_set_together(private_key_pem, app_secret) -> None:
    with pytest.raises(ValueError):
        TenantCredential(tenant_id="t1", private_key_pem=private_key_pem, app_secret=app_secret)


def test_resolution_candidate_requires_active_and_complete() -> None:
    complete = TenantCredential(tenant_id="t1", private_key_pem="pem", app_secret="s")

    assert complete.is_resolution_candidate
    assert not TenantCredential(tenant_id="t2").is_resolution_candidate
    assert not TenantCredential(
        tenant_id="t3", private_key_pem="pem", app_secret="s", is_active=False
    ).is_resolution_candidate


def test_rotation_resets_upload_confirmation() -> None:
    tenant = TenantCredential(
        tenant_id="t1",
        private_key_pem="old",
        public_key_pem="old-pub",
        app_secret="s",
        public_key_uploaded=True,
        public_key_uploaded_at=datetime(2026, 1, 1, tzinfo=UTC),
    )

    rotated = tenant.with_rotated_keys(private_key_pem="new", public_key_pem="new-pub")

    assert rotated.private_key_pem == "new"
    assert rotated.public_key_pem == "new-pub"
    assert rotated.app_secret == "s"
    assert rotated.public_key_uploaded is False
    assert rotated.public_key_uploaded_at is None
    assert tenant.private_key_pem == "old"


def test_dict_roundtrip() -> None:
    tenant = TenantCredential(
        tenant_id="t1",
        name="Loja",
        private_key_pem="pem",
        app_secret="s",
        public_key_uploaded=True,
        public_key_uploaded_at=datetime(2026, 1, 1, 12, tzinfo=UTC),
    )

    assert TenantCredential.from_dict(tenant.to_dict()) == tenant


def test_from_dict_normalizes_blank_values() -> None:
    tenant = TenantCredential.from_dict(
        {"tenant_id": "t1", "private_key_pem": "", "app_secret": "", "name": None}
    )

    assert tenant.private_key_pem is None
    assert tenant.app_secret is None
    assert tenant.name == ""
    assert tenant.is_active is True

"""
Django auth Tenant Store — tenants backed by ``django.contrib.auth``.

The user model's primary key is the tenant id, ``USERNAME_FIELD`` is the
login id and ``email`` is matched case-insensitively.

Settings:
    STOCKFLOW = {
        "TENANT_STORE": "stockflow.adapters.django_auth.DjangoUserTenantStore",
    }
"""

from __future__ import annotations

from django.contrib.auth import get_user_model

from stockflow.protocols.tenants import TenantRecord


class DjangoUserTenantStore:
    """TenantStore implementation over the configured user model."""

    def _to_record(self, user) -> TenantRecord:
        return TenantRecord(
            user_id=user.pk,
            login_id=user.get_username(),
            email=getattr(user, 'email', None) or None,
            is_verified=user.is_active,
        )

    def get_by_id(self, user_id: int) -> TenantRecord | None:
        User = get_user_model()
        user = User._default_manager.filter(pk=user_id).first()
        return self._to_record(user) if user else None

    def find_by_login_id(self, login_id: str) -> TenantRecord | None:
        User = get_user_model()
        user = User._default_manager.filter(
            **{User.USERNAME_FIELD: login_id.strip()}
        ).first()
        return self._to_record(user) if user else None

    def find_by_email_id(self, email: str) -> TenantRecord | None:
        User = get_user_model()
        user = User._default_manager.filter(email__iexact=email.strip()).first()
        return self._to_record(user) if user else None

    def verify_credentials(self, login_id: str, password: str) -> bool:
        User = get_user_model()
        user = User._default_manager.filter(
            **{User.USERNAME_FIELD: login_id.strip()}
        ).first()
        if user is None or not user.is_active:
            return False
        return user.check_password(password)

"""
Warehouses and locations — tenant reference data.

A warehouse short code prefixes document references, so it is stored
upper-cased and restricted to letters and digits.
"""

import logging
import re

from stockflow.exceptions import DuplicateShortCode, NotFound, ValidationError
from stockflow.models.sites import SHORT_CODE_PATTERN, Location, Warehouse
from stockflow.services.base import atomic_write
from stockflow.tenancy import Tenant

logger = logging.getLogger('stockflow')

SHORT_CODE_RE = re.compile(SHORT_CODE_PATTERN)


def _required(value, field: str) -> str:
    value = (value or '').strip()
    if not value:
        raise ValidationError('REQUIRED_FIELD', field=field)
    return value


def _short_code(value, alphanumeric: bool) -> str:
    code = _required(value, 'short_code').upper()
    if alphanumeric and not SHORT_CODE_RE.match(code):
        raise ValidationError('INVALID_SHORT_CODE', field='short_code', value=code)
    return code


class SiteRegistry:
    """CRUD shared by warehouses and locations."""

    model = None
    entity: str = ''
    alphanumeric_codes = False

    @classmethod
    def _clean(cls, tenant: Tenant, data: dict) -> dict:
        return {
            'name': _required(data.get('name'), 'name'),
            'short_code': _short_code(data.get('short_code'), cls.alphanumeric_codes),
        }

    @classmethod
    def _check_code(cls, tenant: Tenant, code: str, exclude_id: int | None = None):
        qs = cls.model.objects.for_tenant(tenant).filter(short_code=code)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        if qs.exists():
            raise DuplicateShortCode(field='short_code', value=code)

    @classmethod
    def create(cls, tenant: Tenant, **data) -> int:
        """
        Returns:
            New row id

        Raises:
            ValidationError: Missing name or short code
            DuplicateShortCode: Code already used by the tenant
        """
        cleaned = cls._clean(tenant, data)
        code = cleaned['short_code']

        with atomic_write(
            f'{cls.entity}.create',
            duplicate=DuplicateShortCode(field='short_code', value=code),
        ):
            cls._check_code(tenant, code)
            obj = cls.model.objects.create(tenant_id=tenant.user_id, **cleaned)

        logger.info(
            f"stockflow.{cls.entity}.created",
            extra={"tenant": tenant.user_id, "short_code": code},
        )
        return obj.pk

    @classmethod
    def update(cls, tenant: Tenant, obj_id: int, **data):
        cleaned = cls._clean(tenant, data)
        code = cleaned['short_code']

        with atomic_write(
            f'{cls.entity}.update',
            duplicate=DuplicateShortCode(field='short_code', value=code),
        ):
            obj = cls._locked(tenant, obj_id)
            cls._check_code(tenant, code, exclude_id=obj.pk)
            for name, value in cleaned.items():
                setattr(obj, name, value)
            obj.save()
        return obj

    @classmethod
    def delete(cls, tenant: Tenant, obj_id: int) -> bool:
        with atomic_write(f'{cls.entity}.delete'):
            cls._locked(tenant, obj_id).delete()

        logger.info(
            f"stockflow.{cls.entity}.deleted",
            extra={"tenant": tenant.user_id, "id": obj_id},
        )
        return True

    @classmethod
    def get(cls, tenant: Tenant, obj_id: int):
        obj = cls.model.objects.for_tenant(tenant).filter(pk=obj_id).first()
        if obj is None:
            raise NotFound(entity=cls.entity, id=obj_id)
        return obj

    @classmethod
    def list(cls, tenant: Tenant):
        return cls.model.objects.for_tenant(tenant).order_by('-created_at', '-id')

    @classmethod
    def _locked(cls, tenant: Tenant, obj_id: int):
        obj = (
            cls.model.objects.select_for_update()
            .for_tenant(tenant)
            .filter(pk=obj_id)
            .first()
        )
        if obj is None:
            raise NotFound(entity=cls.entity, id=obj_id)
        return obj


class Warehouses(SiteRegistry):
    model = Warehouse
    entity = 'warehouse'
    alphanumeric_codes = True

    @classmethod
    def _clean(cls, tenant, data):
        cleaned = super()._clean(tenant, data)
        cleaned['address'] = (data.get('address') or '').strip()
        return cleaned


class Locations(SiteRegistry):
    """Locations link to a warehouse of the same tenant, matched by name."""

    model = Location
    entity = 'location'

    @classmethod
    def _clean(cls, tenant, data):
        cleaned = super()._clean(tenant, data)
        warehouse_name = (data.get('warehouse_name') or '').strip()
        cleaned['warehouse_name'] = warehouse_name
        cleaned['warehouse'] = (
            Warehouse.objects.for_tenant(tenant)
            .filter(name=warehouse_name)
            .order_by('-created_at', '-id')
            .first()
            if warehouse_name else None
        )
        return cleaned

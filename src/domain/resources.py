"""Declarative description of every entity exposed by the API.

An ``EntityResource`` ties together the ORM model, the DTO, the mapping
between DTO attributes and table columns, and the field rules the service
enforces. The generic repository, service and router are instantiated once
per resource.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from src.domain.dtos import (
    EntityDto,
    FormDto,
    ModuleDto,
    ModuleFormDto,
    PermissionDto,
    RolDto,
    RolFormPermissionDto,
    RolUserDto,
    UserDto,
)
from src.domain.models import (
    Form,
    Module,
    ModuleForm,
    Permission,
    Rol,
    RolFormPermission,
    RolUser,
    User,
)
from src.infrastructure.database.base import BaseModel

M = TypeVar("M", bound=BaseModel)
D = TypeVar("D", bound=EntityDto)


@dataclass(frozen=True)
class EntityResource(Generic[M, D]):
    """One entity family: model, DTO, column mapping and validation rules.

    Attributes:
        name: Public entity name, also the URL segment under ``/api``.
        model: ORM model class.
        dto: DTO class used on the wire.
        columns: DTO attribute to model column for the mutable fields.
        required_text: DTO attribute that must be a non-blank string.
        required_reference: DTO attribute that must be a positive id.
        references: DTO attribute to the name of the resource it points at.
    """

    name: str
    model: type[M]
    dto: type[D]
    columns: Mapping[str, str]
    required_text: str | None = None
    required_reference: str | None = None
    references: Mapping[str, str] = field(default_factory=dict)

    def to_dto(self, entity: M) -> D:
        """Map a persisted row to its DTO."""
        data: dict[str, Any] = {
            attr: getattr(entity, column) for attr, column in self.columns.items()
        }
        data["id"] = entity.id
        data["is_deleted"] = bool(entity.is_deleted)
        return self.dto.model_validate(data)

    def to_values(self, dto: D) -> dict[str, Any]:
        """Column values written by create and by a full update."""
        values = {column: getattr(dto, attr) for attr, column in self.columns.items()}
        values["is_deleted"] = dto.is_deleted
        return values

    def to_entity(self, dto: D) -> M:
        """Build a new, not yet persisted, row from a DTO."""
        return self.model(**self.to_values(dto))

    def field_alias(self, attr: str) -> str:
        """Wire name of a DTO attribute, used in error messages."""
        return self.dto.model_fields[attr].alias or attr


ROLE = EntityResource(
    name="Role",
    model=Rol,
    dto=RolDto,
    columns={"name": "name"},
    required_text="name",
)

USER = EntityResource(
    name="User",
    model=User,
    dto=UserDto,
    columns={
        "name": "name",
        "last_name": "last_name",
        "email": "email",
        "password": "password",
        "identification": "identification",
        "phone": "phone",
        "address": "address",
    },
    required_text="name",
)

PERMISSION = EntityResource(
    name="Permission",
    model=Permission,
    dto=PermissionDto,
    columns={"name": "name", "description": "description"},
    required_text="name",
)

FORM = EntityResource(
    name="Form",
    model=Form,
    dto=FormDto,
    columns={"name": "name", "description": "description"},
    required_text="name",
)

MODULE = EntityResource(
    name="Module",
    model=Module,
    dto=ModuleDto,
    columns={"name": "name", "description": "description", "code": "code"},
    required_text="name",
)

ROL_USER = EntityResource(
    name="RolUser",
    model=RolUser,
    dto=RolUserDto,
    columns={"rol_id": "rol_id", "user_id": "user_id"},
    required_reference="user_id",
    references={"rol_id": "Role", "user_id": "User"},
)

ROL_FORM_PERMISSION = EntityResource(
    name="RolFormPermission",
    model=RolFormPermission,
    dto=RolFormPermissionDto,
    columns={
        "rol_id": "rol_id",
        "form_id": "form_id",
        "permission_id": "permission_id",
    },
    required_reference="rol_id",
    references={"rol_id": "Role", "form_id": "Form", "permission_id": "Permission"},
)

MODULE_FORM = EntityResource(
    name="ModuleForm",
    model=ModuleForm,
    dto=ModuleFormDto,
    columns={"module_id": "module_id", "form_id": "form_id"},
    required_reference="module_id",
    references={"module_id": "Module", "form_id": "Form"},
)

RESOURCES: tuple[EntityResource[Any, Any], ...] = (
    ROLE,
    USER,
    PERMISSION,
    MODULE,
    FORM,
    ROL_USER,
    ROL_FORM_PERMISSION,
    MODULE_FORM,
)

RESOURCES_BY_NAME: Mapping[str, EntityResource[Any, Any]] = {
    resource.name: resource for resource in RESOURCES
}


def get_resource(name: str) -> EntityResource[Any, Any]:
    """Look up a resource by its public name.

    Raises:
        KeyError: If no resource has that name.
    """
    return RESOURCES_BY_NAME[name]

"""Data transfer objects exchanged over the HTTP API.

Attributes use snake_case in Python and the PascalCase names of the public
contract on the wire (``RolId``, ``RolName``, ``IsDeleted`` ...). Both
spellings are accepted on input.

Required text fields are typed as optional so that a missing or blank value
reaches the service and is reported with a field-specific message.
"""

from pydantic import BaseModel, ConfigDict, Field


class EntityDto(BaseModel):
    """Base class for every entity DTO."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    is_deleted: bool = Field(default=False, alias="IsDeleted")


class RolDto(EntityDto):
    id: int = Field(default=0, alias="RolId")
    name: str | None = Field(default=None, alias="RolName")


class UserDto(EntityDto):
    id: int = Field(default=0, alias="Id")
    name: str | None = Field(default=None, alias="Name")
    last_name: str | None = Field(default=None, alias="LastName")
    email: str | None = Field(default=None, alias="Email")
    password: str | None = Field(default=None, alias="Password")
    identification: str | None = Field(default=None, alias="Identification")
    phone: str | None = Field(default=None, alias="Phone")
    address: str | None = Field(default=None, alias="Address")


class PermissionDto(EntityDto):
    id: int = Field(default=0, alias="PermissionId")
    name: str | None = Field(default=None, alias="PermissionName")
    description: str | None = Field(default=None, alias="PermissionDescription")


class FormDto(EntityDto):
    id: int = Field(default=0, alias="FormId")
    name: str | None = Field(default=None, alias="FormName")
    description: str | None = Field(default=None, alias="FormDescription")


class ModuleDto(EntityDto):
    id: int = Field(default=0, alias="ModuleId")
    name: str | None = Field(default=None, alias="ModuleName")
    description: str | None = Field(default=None, alias="ModuleDescription")
    code: str | None = Field(default=None, alias="ModuleCode")


class RolUserDto(EntityDto):
    id: int = Field(default=0, alias="RolUserId")
    rol_id: int = Field(default=0, alias="RolId")
    user_id: int = Field(default=0, alias="UserId")


class RolFormPermissionDto(EntityDto):
    id: int = Field(default=0, alias="RolFormPermissionId")
    rol_id: int = Field(default=0, alias="RolId")
    form_id: int = Field(default=0, alias="FormId")
    permission_id: int = Field(default=0, alias="PermissionId")


class ModuleFormDto(EntityDto):
    id: int = Field(default=0, alias="ModuleFormId")
    module_id: int = Field(default=0, alias="ModuleId")
    form_id: int = Field(default=0, alias="FormId")

"""Wire payloads shared by the service and route tests, one set per entity."""

from typing import Any, NamedTuple

from src.domain.resources import RESOURCES


class EntityPayloads(NamedTuple):
    """A payload that is accepted and one that is rejected with ``message``."""

    valid: dict[str, Any]
    invalid: dict[str, Any]
    message: str


PAYLOADS: dict[str, EntityPayloads] = {
    "Role": EntityPayloads(
        valid={"RolName": "Admin"},
        invalid={"RolName": "   "},
        message="RolName is required",
    ),
    "User": EntityPayloads(
        valid={
            "Name": "Ana",
            "LastName": "Lopez",
            "Email": "ana@example.com",
            "Password": "s3cret",
            "Identification": "1001",
            "Phone": "3001234567",
            "Address": "Calle 1",
        },
        invalid={"Name": "", "Email": "ana@example.com"},
        message="Name is required",
    ),
    "Permission": EntityPayloads(
        valid={"PermissionName": "Read", "PermissionDescription": "Read access"},
        invalid={"PermissionName": "  ", "PermissionDescription": "Read access"},
        message="PermissionName is required",
    ),
    "Module": EntityPayloads(
        valid={
            "ModuleName": "Catastro",
            "ModuleDescription": "Property registry",
            "ModuleCode": "CAT",
        },
        invalid={"ModuleName": None, "ModuleCode": "CAT"},
        message="ModuleName is required",
    ),
    "Form": EntityPayloads(
        valid={"FormName": "Liquidacion", "FormDescription": "Tax assessment"},
        invalid={"FormName": ""},
        message="FormName is required",
    ),
    "RolUser": EntityPayloads(
        valid={"RolId": 1, "UserId": 2},
        invalid={"RolId": 1, "UserId": 0},
        message="UserId must be greater than zero",
    ),
    "RolFormPermission": EntityPayloads(
        valid={"RolId": 1, "FormId": 2, "PermissionId": 3},
        invalid={"FormId": 2, "PermissionId": 3},
        message="RolId must be greater than zero",
    ),
    "ModuleForm": EntityPayloads(
        valid={"ModuleId": 2, "FormId": 3},
        invalid={"ModuleId": 0, "FormId": 3},
        message="ModuleId must be greater than zero",
    ),
}

ENTITY_NAMES = [resource.name for resource in RESOURCES]

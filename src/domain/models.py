"""ORM models for the administration tables.

Every model inherits ``id`` and ``is_deleted`` from ``BaseModel``. Foreign
keys are plain references with no ON DELETE behaviour.
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.base import BaseModel


class Rol(BaseModel):
    __tablename__ = "rols"

    name: Mapped[str] = mapped_column(String(100), nullable=False)


class User(BaseModel):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(150))
    password: Mapped[str | None] = mapped_column(String(255))
    identification: Mapped[str | None] = mapped_column(String(50))
    phone: Mapped[str | None] = mapped_column(String(30))
    address: Mapped[str | None] = mapped_column(String(255))


class Permission(BaseModel):
    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255))


class Form(BaseModel):
    __tablename__ = "forms"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255))


class Module(BaseModel):
    __tablename__ = "modules"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255))
    code: Mapped[str | None] = mapped_column(String(50))


class RolUser(BaseModel):
    __tablename__ = "rol_users"

    rol_id: Mapped[int] = mapped_column(Integer, ForeignKey("rols.id"), index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)


class RolFormPermission(BaseModel):
    __tablename__ = "rol_form_permissions"

    rol_id: Mapped[int] = mapped_column(Integer, ForeignKey("rols.id"), index=True)
    form_id: Mapped[int] = mapped_column(Integer, ForeignKey("forms.id"), index=True)
    permission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("permissions.id"), index=True
    )


class ModuleForm(BaseModel):
    __tablename__ = "module_forms"

    module_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("modules.id"), index=True
    )
    form_id: Mapped[int] = mapped_column(Integer, ForeignKey("forms.id"), index=True)


__all__ = [
    "Form",
    "Module",
    "ModuleForm",
    "Permission",
    "Rol",
    "RolFormPermission",
    "RolUser",
    "User",
]

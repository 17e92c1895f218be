"""Role-based ownership scopes.

Every request is served under an :class:`AccessPolicy` built from the
session principal. Routers never infer owners on their own: they ask the
policy for the :class:`OwnerScope` of an ``(entity, operation)`` pair and
filter their queries with it. A refusal is raised as ``Forbidden``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from sqlalchemy import ColumnElement, false

from .errors import Forbidden


class EntityKind(str, Enum):
    CLIENT = "client"
    MATERIAL = "material"
    STOCK_ITEM = "stock_item"
    SETTINGS = "settings"
    EMPLOYEE = "employee"
    CALCULATION = "calculation"
    USER = "user"


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    # update, delete and status changes of existing rows
    MODIFY = "modify"


@dataclass(frozen=True)
class Principal:
    """Who is calling, as recorded on the session."""

    user_id: str
    username: str
    is_admin: bool = False
    is_master_admin: bool = False


@dataclass(frozen=True)
class OwnerScope:
    """The rows an operation may touch.

    Either a set of owner ids, or (for a non-admin reading employees) the
    single row linked to a user id.
    """

    owner_ids: frozenset[str] = frozenset()
    linked_user_id: str | None = None

    def clause(self, model) -> ColumnElement[bool]:
        """SQL filter selecting exactly the rows of ``model`` in this scope."""

        if self.linked_user_id is not None:
            return model.linked_user_id == self.linked_user_id
        if not self.owner_ids:
            return false()
        return model.owner_id.in_(sorted(self.owner_ids))

    def allows_owner(self, owner_id: str) -> bool:
        return owner_id in self.owner_ids


_ADMIN_ONLY = {EntityKind.CLIENT, EntityKind.MATERIAL, EntityKind.STOCK_ITEM}


class AccessPolicy:
    """Maps ``(entity, operation)`` to an owner scope for one principal.

    ``linked_user_ids`` are the logins of the employees owned by the
    principal; they widen quote visibility for admins and nothing else.
    """

    def __init__(self, principal: Principal, linked_user_ids: Iterable[str] = ()) -> None:
        self.principal = principal
        self.linked_user_ids = frozenset(
            uid for uid in linked_user_ids if uid and uid != principal.user_id
        )

    @property
    def own(self) -> OwnerScope:
        return OwnerScope(owner_ids=frozenset({self.principal.user_id}))

    def scope(self, kind: EntityKind, operation: Operation) -> OwnerScope:
        principal = self.principal

        if kind in _ADMIN_ONLY:
            if not principal.is_admin:
                raise Forbidden("Administrator role required")
            return self.own

        if kind is EntityKind.SETTINGS:
            return self.own

        if kind is EntityKind.EMPLOYEE:
            if operation is Operation.READ:
                if principal.is_admin:
                    return self.own
                return OwnerScope(linked_user_id=principal.user_id)
            if not principal.is_master_admin:
                raise Forbidden("Only the master administrator can manage employees")
            return self.own

        if kind is EntityKind.CALCULATION:
            if operation is Operation.CREATE or not principal.is_admin:
                return self.own
            return OwnerScope(owner_ids=frozenset({principal.user_id}) | self.linked_user_ids)

        if kind is EntityKind.USER:
            if not principal.is_master_admin:
                raise Forbidden("Only the master administrator can manage users")
            return OwnerScope()

        raise Forbidden()

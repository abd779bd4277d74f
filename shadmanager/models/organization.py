from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class OrgRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"


class MembershipContext(BaseModel):
    user_id: str
    organization_id: str
    role: str = OrgRole.STAFF.value

    @classmethod
    def from_row(cls, user_id: str, row: dict) -> MembershipContext | None:
        """Build the context from an ``organization_members`` row, or None without an organization."""
        org_id = row.get("organization_id")
        if not org_id:
            return None
        role = row.get("role")
        if role not in {r.value for r in OrgRole}:
            role = OrgRole.STAFF.value
        return cls(user_id=user_id, organization_id=str(org_id), role=role)

    @property
    def can_manage(self) -> bool:
        return self.role in (OrgRole.OWNER.value, OrgRole.ADMIN.value)

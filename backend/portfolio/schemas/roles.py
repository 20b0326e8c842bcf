"""Schemas for role management and the Clerk webhook acknowledgement."""

from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field


class RoleSyncRequest(BaseModel):
    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("user_id", "userId"))


class RoleSyncResponse(BaseModel):
    success: bool = True
    user_id: str
    is_super_admin: bool
    clerk_roles: List[str]
    supabase_roles: List[str]
    added: List[str]
    removed: List[str]
    admin_role_assigned: bool


class UserRolesResponse(BaseModel):
    user_id: str
    roles: List[str]
    is_admin: bool


class ToggleRoleRequest(BaseModel):
    user_id: str = Field(..., min_length=1, validation_alias=AliasChoices("user_id", "userId"))
    role: str
    # checked by RoleSyncService.toggle_role
    action: str


class ToggleRoleResponse(BaseModel):
    success: bool = True
    user_id: str
    role: str
    action: Literal["add", "remove"]
    changed: bool
    roles: List[str]
    clerk_synced: bool


class WebhookAckResponse(BaseModel):
    ok: bool = True
    event_type: Optional[str] = None
    outcome: Optional[str] = None
    duplicate: bool = False

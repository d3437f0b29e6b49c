from typing import Optional, Dict, Any
from pydantic import BaseModel, EmailStr, Field

from .enums import AdminUserRole


# -------------------------------------------------
# Admin user management (admin_users table)
# -------------------------------------------------
class AdminUserCreate(BaseModel):
    email: EmailStr
    role: AdminUserRole
    # Stored, never enforced
    permissions: Dict[str, Any] = Field(default_factory=dict)


class AdminUserUpdate(BaseModel):
    role: Optional[AdminUserRole] = None
    permissions: Optional[Dict[str, Any]] = None

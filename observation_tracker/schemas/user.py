from datetime import datetime
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    email: str
    display_name: str
    role: str  # admin|coordinator|observer|teacher
    department: str = ""
    permissions: list[str] | None = None  # None -> role defaults


class UserUpdate(BaseModel):
    display_name: str | None = None
    role: str | None = None
    department: str | None = None
    permissions: list[str] | None = None
    is_active: bool | None = None


class UserOut(BaseModel):
    id: str
    email: str
    display_name: str
    role: str
    department: str
    permissions: list[str] = Field(default_factory=list)
    is_active: bool
    last_login: datetime | None = None

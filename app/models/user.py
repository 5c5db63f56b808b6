from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    id: str = Field(..., alias="_id")
    email: str
    name: Optional[str] = None

    created_at: Optional[datetime] = None

    is_active: bool = True
    is_admin: bool = False

    class Config:
        populate_by_name = True

    @property
    def display_name(self) -> str:
        return display_name_for(self.name, self.email)


def display_name_for(name: Optional[str], email: Optional[str]) -> str:
    """Nombre visible: el name, si no la parte local del email, si no "Anonymous" """
    if name:
        return name
    if email and email.split("@")[0]:
        return email.split("@")[0]
    return "Anonymous"

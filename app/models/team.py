from typing import Optional
from pydantic import BaseModel


class Team(BaseModel):
    """Equipo. Los colores solo los usa el frontend"""

    id: int
    name: str
    nickname: str  # nombre corto: "KC", "Chiefs"

    primary_color: Optional[str] = None    # "#E31837"
    secondary_color: Optional[str] = None

    class Config:
        populate_by_name = True

"""
Dependencies de FastAPI para autenticacion e inyeccion de BD
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.security import decode_access_token
from app.database import get_database
from app.repositories.user_repository import UserRepository
from app.models.user import User
from app.services.change_notifier import ChangeNotifier, get_notifier

# Esquema de seguridad: espera un header "Authorization: Bearer <token>"
security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> User:
    """
    Dependency que valida el JWT del usuario.

    Se usa en los endpoints que requieren autenticacion.
    Retorna el usuario si el token es valido.
    """
    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token payload has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await UserRepository(db).get_by_id(user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


async def get_admin_user(
    user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Solo admins (el feed de resultados usa una cuenta admin)"""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return user


# Alias de tipos para que se vea mas limpio en los endpoints
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[User, Depends(get_admin_user)]
Database = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
Notifier = Annotated[ChangeNotifier, Depends(get_notifier)]

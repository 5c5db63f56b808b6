"""
Seguridad: verificación de los JWT que emite el proveedor de autenticación

La emisión de sesiones vive fuera de este servicio; aquí solo validamos
el token y sacamos el user_id del claim "sub".
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.core.config import get_settings


def create_access_token(user_id: str, email: str, expire_minutes: int = 60) -> str:
    """
    Firma un JWT con el secreto compartido

    Lo usan las herramientas internas y los tests para hablar con la API
    igual que lo haría el proveedor de sesiones.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,      # Subject: el usuario
        "email": email,
        "exp": now + timedelta(minutes=expire_minutes),
        "iat": now,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decodifica y valida un JWT

    Retorna el payload si es válido, None si está expirado o corrupto
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

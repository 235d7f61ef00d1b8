from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from functools import lru_cache
from quizbuilder.config import settings
from quizbuilder.database import get_supabase_client
import logging

security = HTTPBearer()

@lru_cache
def get_auth_client():
    return get_supabase_client()

def verify_supabase_token(token: str):
    """Verify Supabase JWT token"""
    try:
        user = get_auth_client().auth.get_user(token)
        if user and user.user:
            return user.user
        return None
    except Exception as e:
        logging.error(f"Supabase token verification failed: {e}")
        return None

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Get current user from Supabase JWT token"""
    token = credentials.credentials

    user = verify_supabase_token(token)
    if user:
        return {
            "id": user.id,
            "email": user.email,
            "metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
        }

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials"
    )

def is_admin_user(user: dict) -> bool:
    """Admins carry role=admin in their metadata or are listed in ADMIN_EMAILS"""
    for metadata in (user.get("app_metadata") or {}, user.get("metadata") or {}):
        if metadata.get("role") == "admin":
            return True
    return user.get("email") in settings.admin_emails

async def require_admin(current_user: dict = Depends(get_current_user)):
    """Require admin privileges"""
    if not is_admin_user(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return current_user

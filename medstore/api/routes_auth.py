# medstore/api/routes_auth.py
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from medstore.api.deps import _extract_bearer, current_user, get_db, load_active_user
from medstore.core.config import settings
from medstore.core.security import verify_password
from medstore.models.user import User
from medstore.schemas.auth import LoginIn, TokenOut, UserOut
from medstore.utils.jwt import create_access_refresh

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User inactive")

    access, refresh = create_access_refresh(user.email)
    return TokenOut(access_token=access, refresh_token=refresh)


# ---------------------------------------------------------------------
#  Refresh access token
# ---------------------------------------------------------------------
@router.post("/refresh", response_model=TokenOut)
def refresh_token(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """
    Exchange a refresh token for a new access + refresh pair.

    - Reads refresh_token from cookies (fallback: Authorization Bearer)
    - Only tokens minted as refresh tokens are accepted
    """
    raw_rt = request.cookies.get("refresh_token") or _extract_bearer(authorization)
    if not raw_rt:
        raise HTTPException(status_code=401, detail="Missing refresh token")

    try:
        payload = jwt.decode(raw_rt, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    if payload.get("typ") != "refresh":
        raise HTTPException(status_code=401, detail="Wrong token type")

    user = load_active_user(db, payload.get("sub"))
    access, refresh = create_access_refresh(user.email)
    return TokenOut(access_token=access, refresh_token=refresh)


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(current_user)):
    return user

# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import user as schemas
from services import accounts
from utils.audit import write_log
from utils.errors import EcoHubError
from utils.permissions import permissions_for
from utils.rate_limit import client_ip, login_limiter, rate_limited
from utils.tokenJWT import clear_auth_cookie, get_current_user, set_auth_cookie

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)

login_guard = rate_limited(
    login_limiter, "Too many login attempts. Please try again after 15 minutes."
)


# Register a new account (and optional business/community profile)
@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    try:
        token, user = accounts.register(db, payload)
    except EcoHubError as e:
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email, "reason": e.detail})
        raise

    set_auth_cookie(response, token)
    write_log(db, user_id=user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email, "role": user.role})

    return {"message": "Registration successful", "token": token, "user": user}


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.AuthResponse, dependencies=[Depends(login_guard)])
def login(payload: schemas.UserLogin, request: Request, response: Response, db: Session = Depends(get_db)):
    try:
        token, user = accounts.login(db, payload.email, payload.password)
    except EcoHubError as e:
        logger.warning("Failed login for %s from %s: %s", payload.email, client_ip(request), e.detail)
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email, "reason": e.detail})
        raise

    set_auth_cookie(response, token)
    write_log(db, user_id=user.id, action="LOGIN", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email})

    return {"message": "Login successful", "token": token, "user": user}


# Resolve the presented token to the current account
@router.get("/verify", response_model=schemas.CurrentUserResponse)
def verify(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.put("/profile", response_model=schemas.ProfileUpdateResponse)
def update_profile(
    payload: schemas.ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = accounts.update_profile(db, current_user, payload)
    write_log(db, user_id=user.id, action="PROFILE_UPDATE", resource="auth",
              ip=client_ip(request), meta={"fields": sorted(payload.model_fields_set)})
    return {"message": "Profile updated successfully", "user": user}


@router.put("/password", response_model=schemas.MessageResponse)
def change_password(
    payload: schemas.PasswordChange,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    accounts.change_password(db, current_user, payload)
    write_log(db, user_id=current_user.id, action="PASSWORD_CHANGE", resource="auth", ip=client_ip(request))
    return {"message": "Password changed successfully"}


# Stateless tokens: logging out only drops the cookie
@router.post("/logout", response_model=schemas.MessageResponse)
def logout(response: Response):
    clear_auth_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/permissions", response_model=schemas.PermissionsResponse)
def my_permissions(current_user: User = Depends(get_current_user)):
    return {"role": current_user.role, "permissions": sorted(permissions_for(current_user.role))}

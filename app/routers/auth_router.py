# /app/routers/auth_router.py

"""
This module defines the public-facing API for all authentication-related actions.

It includes endpoints for:
- User registration (`/register`)
- User login and token generation (`/token`)
- Retrieving the current user's profile (`/me`)

The router only translates HTTP to service calls; business rules live in
`user_service` and token handling in `core.security`.
"""

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

# --- Application-specific Imports ---
from ..core import security
from ..core.deps import get_current_active_user
from ..db.base import User as UserModel
from ..models.user_model import RegistrationResponse, Token, User, UserCreate
from ..services import user_service
from ..services.database_service import DatabaseService, get_db_service

# --- Router Initialization ---
router = APIRouter()


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: DatabaseService = Depends(get_db_service)):
    """Creates an account and returns it together with a ready-to-use token."""
    new_user = user_service.create_user(db=db, user=user_in)
    token = security.create_access_token(subject=new_user.id)
    return RegistrationResponse(user=User.model_validate(new_user), token=token)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: DatabaseService = Depends(get_db_service),
):
    """
    Handles user login, compatible with the OAuth2 Password Flow. The email
    goes in the `username` field.
    """
    access_token = user_service.login(db, email=form_data.username, password=form_data.password)
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=User)
def read_current_user(current_user: UserModel = Depends(get_current_active_user)):
    """Retrieves the profile of the authenticated user."""
    return current_user

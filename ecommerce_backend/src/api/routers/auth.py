"""Signup, login and the current user's profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_user
from src.db.models import Profile
from src.schemas.accounts import LoginRequest, ProfileOut, ProfileUpdate, SignupRequest, TokenResponse
from src.services import accounts

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=TokenResponse, status_code=201, summary="Create a customer account")
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    accounts.signup(db, body.email, body.password, body.full_name)
    return accounts.login(db, body.email, body.password)


@router.post("/login", response_model=TokenResponse, summary="Sign in with email and password")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    return accounts.login(db, body.email, body.password)


@router.get("/me", response_model=ProfileOut, summary="Current user")
def me(user: Profile = Depends(require_user)):
    return user


@router.patch("/me", response_model=ProfileOut, summary="Update the current user's name")
def update_me(body: ProfileUpdate, user: Profile = Depends(require_user), db: Session = Depends(get_db)):
    if body.full_name is not None:
        user.full_name = body.full_name.strip() or None
    db.commit()
    return user

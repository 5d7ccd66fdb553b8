"""Session login/logout routes."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_user
from .models import User
from .schemas import LoginRequest, UserResponse
from .service import authenticate_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login")
def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    if not user:
        logger.info("Failed login for %s", payload.email)
        return JSONResponse({"error": "Invalid credentials"}, status_code=401)
    request.session["user_id"] = str(user.id)
    logger.info("User %s logged in", user.email)
    return JSONResponse({"ok": True, "user": UserResponse.model_validate(user).model_dump(mode="json")})


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return JSONResponse({"ok": True})


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user).model_dump(mode="json")

"""
Administrator account and session endpoints.

POST /api/admin/setup     — create a superadmin account
POST /api/admin/login     — start an admin session
POST /api/admin/logout    — end it
GET  /api/admin/session   — current session state
"""
from __future__ import annotations

import logging
import uuid

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.community.models.admin_user import AdminUserModel
from app.community.schemas import (
    AdminCredentials,
    AdminInfo,
    AdminLoginResponse,
    AdminSessionResponse,
    AdminSetupRequest,
    AdminSetupResponse,
)
from app.database import get_db
from app.deps import is_admin_authenticated

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_admin(
    db: Session, username: str, password: str, name: str, role: str = "admin"
) -> AdminUserModel:
    admin = AdminUserModel(
        id=str(uuid.uuid4()),
        username=username,
        password_hash=hash_password(password),
        name=name,
        role=role,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Created admin account %s (%s)", username, role)
    return admin


# ── POST /api/admin/login ─────────────────────────────────────────────────
@router.post("/login", response_model=AdminLoginResponse)
def login(req: AdminCredentials, request: Request, db: Session = Depends(get_db)):
    if not req.username or not req.password:
        raise HTTPException(status_code=400, detail="Username and password required")

    admin = db.query(AdminUserModel).filter(AdminUserModel.username == req.username).first()
    if not admin or not verify_password(req.password, admin.password_hash):
        logger.warning("Failed admin login for %s", req.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    request.session["admin_id"] = admin.id
    request.session["admin_username"] = admin.username
    request.session["admin_role"] = admin.role
    logger.info("Admin %s logged in", admin.username)
    return AdminLoginResponse(
        admin=AdminInfo(id=admin.id, username=admin.username, name=admin.name, role=admin.role)
    )


# ── POST /api/admin/logout ────────────────────────────────────────────────
@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True}


# ── GET /api/admin/session ────────────────────────────────────────────────
@router.get("/session", response_model=AdminSessionResponse)
def session_state(request: Request):
    if not is_admin_authenticated(request):
        return AdminSessionResponse(authenticated=False)
    return AdminSessionResponse(
        authenticated=True,
        admin=AdminInfo(
            id=request.session["admin_id"],
            username=request.session.get("admin_username", ""),
            role=request.session.get("admin_role"),
        ),
    )


# ── POST /api/admin/setup ─────────────────────────────────────────────────
@router.post("/setup", response_model=AdminSetupResponse, status_code=201)
def setup_admin(req: AdminSetupRequest, db: Session = Depends(get_db)):
    if not req.username or not req.password or not req.name:
        raise HTTPException(status_code=400, detail="Username, password, and name required")

    existing = db.query(AdminUserModel).filter(AdminUserModel.username == req.username).first()
    if existing:
        raise HTTPException(status_code=400, detail="Admin setup already completed")

    admin = create_admin(db, req.username, req.password, req.name, role="superadmin")
    return AdminSetupResponse(
        message="Admin account created",
        admin=AdminInfo(id=admin.id, username=admin.username, name=admin.name),
    )

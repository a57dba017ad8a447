"""
Admin authentication blueprint:
- POST /admin/register
- POST /admin/login
- POST /admin/refresh-token
- POST /admin/logout
- GET  /admin/profile (admin only)
"""
from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from models import Admin
from models.schemas.auth import LoginSchema, RegisterSchema
from utils.decorators import admin_required

from .rate_limit import auth_rate_limit, limiter
from .sessions import (
    authenticate,
    end_session,
    principal_out_schema,
    register_principal,
    rotate_session,
    start_session,
)

bp = Blueprint("admin", __name__)
limiter.limit(auth_rate_limit)(bp)

register_schema = RegisterSchema()
login_schema = LoginSchema()


@bp.post("/register")
def register():
    """
    Register a new admin and start a session.
    ---
    tags:
      - Admin
    consumes:
      - application/json
    parameters:
      - in: header
        name: X-CSRF-Token
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created (sets access_token and refresh_token cookies)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = register_schema.load(request.get_json(silent=True) or {})
    admin = register_principal(Admin, data)
    return start_session(admin, status=201)


@bp.post("/login")
def login():
    """
    Admin login.
    ---
    tags:
      - Admin
    consumes:
      - application/json
    parameters:
      - in: header
        name: X-CSRF-Token
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK (sets access_token and refresh_token cookies)
      401:
        description: Invalid credentials or deactivated account
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    admin = authenticate(Admin, data["email"], data["password"])
    return start_session(admin)


@bp.post("/refresh-token")
def refresh_token():
    """
    Rotate the refresh_token cookie and issue a new access token.
    ---
    tags:
      - Admin
    responses:
      200:
        description: OK
      401:
        description: Missing, invalid, expired or reused refresh token
    """
    return rotate_session()


@bp.post("/logout")
def logout():
    """
    Revoke the refresh token family and clear the session cookies.
    ---
    tags:
      - Admin
    responses:
      200:
        description: Logged out
    """
    return end_session()


@bp.get("/profile")
@admin_required()
def profile():
    """
    Current admin profile.
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": principal_out_schema.dump(g.current_principal)}), 200

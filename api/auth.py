"""
Customer authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/profile    (customer only)
- GET  /auth/session    (anonymous or authenticated)
- GET  /auth/csrf-token

Cookies carry the session: access_token and refresh_token are HTTP-only,
csrf_token is readable and must be echoed in X-CSRF-Token on unsafe methods.
"""
from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from models import Customer
from models.schemas.auth import LoginSchema, RegisterSchema
from utils.csrf import current_csrf_token
from utils.decorators import customer_required, optional_auth

from .rate_limit import auth_rate_limit, limiter
from .sessions import (
    authenticate,
    end_session,
    principal_out_schema,
    register_principal,
    rotate_session,
    start_session,
)

bp = Blueprint("auth", __name__)
limiter.limit(auth_rate_limit)(bp)

register_schema = RegisterSchema()
login_schema = LoginSchema()


@bp.post("/register")
def register():
    """
    Register a new customer and start a session.
    ---
    tags:
      - Auth
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
        description: Created
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = register_schema.load(request.get_json(silent=True) or {})
    customer = register_principal(Customer, data)
    return start_session(customer, status=201)


@bp.post("/login")
def login():
    """
    Customer login.
    ---
    tags:
      - Auth
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
        description: OK
      401:
        description: Unauthorized
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    customer = authenticate(Customer, data["email"], data["password"])
    return start_session(customer)


@bp.post("/refresh")
def refresh():
    """
    Rotate the refresh_token cookie.
    ---
    tags:
      - Auth
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
    Logout: revoke refresh family and clear cookies.
    ---
    tags:
      - Auth
    responses:
      200:
        description: Logged out
    """
    return end_session()


@bp.get("/profile")
@customer_required()
def profile():
    """
    Current customer profile.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": principal_out_schema.dump(g.current_principal)}), 200


@bp.get("/session")
@optional_auth()
def session():
    """
    Who is calling; never rejects anonymous callers.
    ---
    tags:
      - Auth
    responses:
      200:
        description: OK
    """
    principal = g.current_principal
    return jsonify(
        {
            "data": {
                "authenticated": principal is not None,
                "kind": principal.kind.value if principal is not None else None,
                "principal": principal_out_schema.dump(principal) if principal is not None else None,
            }
        }
    ), 200


@bp.get("/csrf-token")
def csrf_token():
    """
    Current CSRF token (also set as the csrf_token cookie).
    ---
    tags:
      - Auth
    responses:
      200:
        description: OK
    """
    return jsonify({"data": {"csrfToken": current_csrf_token()}}), 200

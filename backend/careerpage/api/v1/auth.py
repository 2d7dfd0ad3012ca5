from __future__ import annotations

import logging

from flask import Blueprint, g, jsonify
from pydantic import BaseModel, Field, field_validator

from careerpage.api.v1.common import parse_body
from careerpage.core.database import get_db
from careerpage.core.exceptions import Conflict, Unauthenticated
from careerpage.models.user import User
from careerpage.services.auth import create_access_token, hash_password, login_required, verify_password
from careerpage.services.gateway import TableGateway

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)


class Credentials(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("email must be a valid address")
        return value


@bp.post("/auth/signup")
def signup():
    creds = parse_body(Credentials)
    with get_db() as db:
        users = TableGateway(db, User)
        if users.select("id").filter("email", creds.email).maybe_single().unwrap():
            raise Conflict("An account with this email already exists")
        user = users.insert({
            "email": creds.email,
            "password_hash": hash_password(creds.password),
        }).unwrap()
    logger.info("Registered user %s", user["id"])
    return jsonify(user), 201


@bp.post("/auth/login")
def login():
    creds = parse_body(Credentials)
    with get_db() as db:
        user = db.query(User).filter(User.email == creds.email).first()
        if not user or not verify_password(creds.password, user.password_hash):
            raise Unauthenticated("Invalid email or password")
        token = create_access_token(user.id)
    return jsonify({"access_token": token, "token_type": "bearer"})


@bp.get("/auth/me")
@login_required
def me():
    return jsonify(g.current_user.to_dict())

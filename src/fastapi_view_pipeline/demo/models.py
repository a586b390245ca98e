"""View-models and forms used by the demo application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel

from fastapi_view_pipeline.forms import FormField


class LoginForm(BaseModel):
    email: Annotated[str, FormField("email", rules=("required", "email"))] = ""
    password: Annotated[
        str, FormField("password", rules=("required",), secret=True)
    ] = ""


@dataclass(frozen=True)
class User:
    id: str
    name: str


@dataclass(frozen=True)
class Sitemap:
    last_mod: datetime


def get_user_by_id(user_id: str) -> User:
    return User(id=user_id, name="Yaitoo")

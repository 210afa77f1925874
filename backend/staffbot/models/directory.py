"""Result variants produced by the directory resolver."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel

from staffbot.models.employee import Employee


class Found(BaseModel):
    kind: Literal["found"] = "found"
    employee: Employee


class NotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"


class NotApplicable(BaseModel):
    kind: Literal["not_applicable"] = "not_applicable"


Lookup = Union[Found, NotFound]


class ResolverReply(BaseModel):
    """``handled`` means reply with ``text`` and skip the conversational fallback."""

    handled: bool
    text: str = ""


class NamePair(BaseModel):
    first_name: str
    last_name: str

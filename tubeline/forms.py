"""JSON request bodies.

Fields are optional so handlers can report blank or missing input with
their own messages instead of a generic validation error.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestForm(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LoginForm(RequestForm):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class ChangePasswordForm(RequestForm):
    old_password: str | None = None
    new_password: str | None = None


class AccountForm(RequestForm):
    full_name: str | None = None
    email: str | None = None


class TweetForm(RequestForm):
    content: str | None = None

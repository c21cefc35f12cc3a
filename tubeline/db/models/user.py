from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tubeline.db.base import Base


class User(Base):
    """Registered account.

    ``password_hash`` and ``refresh_token`` are credentials and never leave
    the service layer; response shapes are built from the public fields.
    """

    __tablename__ = "users"

    # Identity
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    # Profile
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(String(1024), nullable=False)
    cover_image: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    # Credentials
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(String(1024), nullable=True)

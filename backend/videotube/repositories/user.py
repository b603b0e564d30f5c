"""User repository: lookups, uniqueness checks and the refresh-token slot."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from videotube.models.user import User
from videotube.repositories.base import BaseRepository


def _norm(value: str) -> str:
    return value.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER signs tokens; it only stores the refresh token string handed to it.
    """

    model = User

    def _filterable_fields(self):
        return {"id": User.id, "email": User.email, "username": User.username}

    def _updatable_fields(self):
        """Profile fields (password and refresh token have dedicated methods)."""
        return {"full_name", "email", "avatar", "cover_image"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_login(self, *, username: str | None = None, email: str | None = None) -> User | None:
        """Fetch the user matching ``username`` OR ``email``.

        Blank identifiers are ignored. Returns ``None`` when both are blank.
        """
        clauses = []
        if username and username.strip():
            clauses.append(User.username == _norm(username))
        if email and email.strip():
            clauses.append(User.email == _norm(email))
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id).limit(1)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == _norm(username))
        return self.session.execute(stmt).first() is not None

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == _norm(email))
        return self.session.execute(stmt).first() is not None

    # ---------------------------- Session slot ----------------------------

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite the stored refresh token (``None`` clears it).

        Issues a single ``UPDATE`` touching only ``refresh_token`` so other
        columns are neither re-validated nor rewritten.

        :returns: ``True`` when a row was updated.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)

    def rotate_refresh_token(self, user_id: int, expected: str, replacement: str) -> bool:
        """Swap the stored token only if it still equals ``expected``.

        The comparison happens in the ``UPDATE ... WHERE`` itself, so two
        concurrent refreshes with the same token cannot both succeed.

        :returns: ``True`` when the swap happened.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=replacement)
            .execution_options(synchronize_session="fetch")
        )
        return bool(self.session.execute(stmt).rowcount)

    def clear_refresh_token(self, user_id: int) -> bool:
        """Drop the stored refresh token so no refresh succeeds afterwards."""
        return self.set_refresh_token(user_id, None)

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user: User, new_password: str) -> None:
        """Hash and store a new password, then flush.

        :param user: Loaded user entity.
        :param new_password: Raw password; the model setter hashes it.
        """
        user.password = new_password
        self.flush()

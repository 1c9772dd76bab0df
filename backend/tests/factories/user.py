"""Factory Boy definition for :class:`blogapi.models.user.User`."""

from __future__ import annotations

import bcrypt
import factory

from blogapi.models.user import Role, User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


def hash_password(plaintext: str) -> str:
    """bcrypt hash at the minimum cost so the suite stays fast."""
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


class UserFactory(BaseFactory):
    """
    Build persisted :class:`blogapi.models.user.User` instances.

    Notes
    -----
    - ``password`` is a factory parameter: the stored column is its hash.
    - Use ``AdminFactory`` / ``SuperAdminFactory`` for elevated roles.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.LazyAttribute(lambda o: o.username.capitalize())
    password_hash = factory.LazyAttribute(lambda o: hash_password(o.password))
    avatar = None
    role = Role.USER
    is_active = True


class AdminFactory(UserFactory):
    role = Role.ADMIN


class SuperAdminFactory(UserFactory):
    role = Role.SUPER_ADMIN

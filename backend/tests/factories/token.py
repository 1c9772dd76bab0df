"""Factory for stored refresh tokens."""

from __future__ import annotations

from datetime import timedelta

import factory

from blogapi.models.base import utcnow
from blogapi.models.refresh_token import RefreshToken
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class RefreshTokenFactory(BaseFactory):
    class Meta:
        model = RefreshToken

    token = factory.Sequence(lambda n: f"refresh-token-{n}")
    user = factory.SubFactory(UserFactory)
    expires_at = factory.LazyFunction(lambda: utcnow() + timedelta(days=7))
    is_revoked = False

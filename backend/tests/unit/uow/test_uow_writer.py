"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from blogapi.models.category import Category
from blogapi.uow import SQLAlchemyUnitOfWork
from tests.factories.content import CategoryFactory


def _count(session) -> int:
    return session.execute(select(func.count(Category.id))).scalar_one()


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, session):
        """
        GIVEN a writer UoW
        WHEN a row is added inside the block and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = _count(session)

        with SQLAlchemyUnitOfWork() as uow:
            uow.categories.add(CategoryFactory.build())

        assert _count(session) == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, session):
        """
        GIVEN a writer UoW
        WHEN an exception escapes the block
        THEN nothing written inside it persists.
        """
        initial = _count(session)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.categories.add(CategoryFactory.build())
            raise RuntimeError("boom")

        assert _count(session) == initial

    def test_rollback_keeps_previously_committed_rows(self, session):
        kept = CategoryFactory()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.categories.delete(uow.categories.get(kept.id))
            raise RuntimeError("boom")

        assert SQLAlchemyUnitOfWork().categories.get(kept.id) is not None

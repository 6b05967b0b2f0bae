"""
Unit tests for the record store repositories and catalog seeding.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from enchantedtome.storage import SAMPLE_BOOKS, BookModel, seed_books


class TestBookRepository:
    """Tests for BookRepository."""

    def test_create_assigns_id_and_timestamps(self, book_repo):
        book = book_repo.create(title="Emma", author="Jane Austen", price=12.5)

        assert book.id
        assert book.title == "Emma"
        assert book.price == 12.5
        assert book.category == "Fiction"
        assert book.in_stock is True
        assert book.created_at == book.updated_at

    def test_get(self, book_repo):
        created = book_repo.create(title="Emma", author="Jane Austen")

        assert book_repo.get(created.id) == created
        assert book_repo.get("missing") is None

    def test_update_merges_fields(self, book_repo):
        created = book_repo.create(title="Emma", author="Jane Austen", price=12.5)

        updated = book_repo.update(created.id, price=8.0, in_stock=False)

        assert updated.id == created.id
        assert updated.title == "Emma"
        assert updated.price == 8.0
        assert updated.in_stock is False
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.created_at

    def test_update_ignores_store_owned_fields(self, book_repo):
        created = book_repo.create(title="Emma", author="Jane Austen")

        updated = book_repo.update(
            created.id,
            id="hijacked",
            created_at=datetime(1999, 1, 1),
            title="Persuasion",
        )

        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.title == "Persuasion"
        assert book_repo.get("hijacked") is None

    def test_update_missing(self, book_repo):
        assert book_repo.update("missing", title="x") is None

    def test_delete_returns_removed_book(self, book_repo):
        created = book_repo.create(title="Emma", author="Jane Austen")

        removed = book_repo.delete(created.id)

        assert removed.id == created.id
        assert book_repo.get(created.id) is None
        assert book_repo.delete(created.id) is None

    def test_list_all_newest_first(self, book_repo):
        now = datetime(2024, 6, 1)
        with book_repo.get_session() as session:
            for i, title in enumerate(["Oldest", "Middle", "Newest"]):
                stamp = now + timedelta(minutes=i)
                session.add(BookModel(
                    id=f"b{i}", title=title, author="A", created_at=stamp, updated_at=stamp,
                ))
            session.commit()

        assert [b.title for b in book_repo.list_all()] == ["Newest", "Middle", "Oldest"]

    def test_negative_price_rejected_by_store(self, book_repo):
        with pytest.raises(IntegrityError):
            book_repo.create(title="Emma", author="Jane Austen", price=-1)

    def test_to_dict_uses_wire_names(self, book_repo):
        data = book_repo.create(title="Emma", author="Jane Austen", cover_url="x").to_dict()

        assert data["coverUrl"] == "x"
        assert "inStock" in data
        assert "createdAt" in data


class TestUserRepository:
    """Tests for UserRepository."""

    def test_upsert_creates_non_admin(self, user_repo):
        user = user_repo.upsert("u-1", email="a@example.com", first_name="Ada", last_name="Lovelace")

        assert user.id == "u-1"
        assert user.email == "a@example.com"
        assert user.is_admin is False

    def test_upsert_refreshes_profile(self, user_repo):
        user_repo.upsert("u-1", email="old@example.com", first_name="Ada")

        user = user_repo.upsert("u-1", email="new@example.com", first_name="Augusta")

        assert user.email == "new@example.com"
        assert user.first_name == "Augusta"

    def test_upsert_never_changes_admin_flag(self, user_repo):
        user_repo.upsert("u-1", email="a@example.com")
        user_repo.update("u-1", is_admin=True)

        user = user_repo.upsert("u-1", email="a@example.com")
        assert user.is_admin is True

        user_repo.update("u-1", is_admin=False)
        user = user_repo.upsert("u-1", email="a@example.com")
        assert user.is_admin is False

    def test_update_missing(self, user_repo):
        assert user_repo.update("nobody", is_admin=True) is None

    def test_get_missing(self, user_repo):
        assert user_repo.get("nobody") is None


class TestSeed:
    """Tests for sample catalog seeding."""

    def test_seeds_empty_catalog(self, book_repo):
        created = seed_books(book_repo)

        assert created == len(SAMPLE_BOOKS)
        assert book_repo.count() == len(SAMPLE_BOOKS)

    def test_skips_populated_catalog(self, book_repo):
        book_repo.create(title="Emma", author="Jane Austen")

        assert seed_books(book_repo) == 0
        assert book_repo.count() == 1

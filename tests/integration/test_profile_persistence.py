"""Profile persistence against PostgreSQL.

Skipped automatically when no database is reachable (see conftest).
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.models import User, UserProfile
from app.services.auth import create_user_token
from app.services.errors import EmptyUpdateError, PersistenceError, ProfileNotFoundError
from app.services.profile_service import get_profile, update_profile


def _make_user(db: Session, email: str, first_name: str = "Ada", last_name: str = "Lovelace") -> User:
    user = User(email=email, first_name=first_name, last_name=last_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _profile_row(db: Session, user_id: int) -> dict | None:
    row = (
        db.execute(
            text(
                "SELECT user_id, headline, bio, avatar_url, cover_photo_url, location, "
                "phone_number, website_url, linkedin_url, github_url "
                "FROM user_profiles WHERE user_id = :user_id"
            ),
            {"user_id": user_id},
        )
        .mappings()
        .first()
    )
    return dict(row) if row is not None else None


def _user_row(db: Session, user_id: int) -> dict:
    row = (
        db.execute(
            text("SELECT first_name, last_name, email FROM users WHERE id = :id"),
            {"id": user_id},
        )
        .mappings()
        .one()
    )
    return dict(row)


class TestGetProfilePersistence:
    def test_user_without_profile_row_has_null_profile_fields(self, db: Session) -> None:
        user = _make_user(db, "noprofile@example.com")

        result = get_profile(db, user.id)

        assert result["user_id"] == user.id
        assert result["email"] == "noprofile@example.com"
        assert result["first_name"] == "Ada"
        assert result["headline"] is None
        assert result["github_url"] is None

    def test_unknown_user_is_not_found(self, db: Session) -> None:
        with pytest.raises(ProfileNotFoundError):
            get_profile(db, 987654321)


class TestUpdateProfilePersistence:
    def test_first_write_creates_profile_row(self, db: Session) -> None:
        user = _make_user(db, "create@example.com")

        update_profile(db, user.id, {"headline": "Analyst", "location": "London"})

        row = _profile_row(db, user.id)
        assert row is not None
        assert row["headline"] == "Analyst"
        assert row["location"] == "London"
        assert row["bio"] is None

    def test_first_name_only_leaves_profiles_untouched(self, db: Session) -> None:
        user = _make_user(db, "nameonly@example.com")

        update_profile(db, user.id, {"first_name": "Augusta"})

        assert _user_row(db, user.id)["first_name"] == "Augusta"
        assert _user_row(db, user.id)["last_name"] == "Lovelace"
        assert _profile_row(db, user.id) is None

    def test_empty_bio_is_stored_as_null(self, db: Session) -> None:
        user = _make_user(db, "clearbio@example.com")
        update_profile(db, user.id, {"bio": "Something", "headline": "Keep"})

        update_profile(db, user.id, {"bio": ""})

        row = _profile_row(db, user.id)
        assert row["bio"] is None
        assert row["headline"] == "Keep"

    def test_omitted_fields_are_not_overwritten(self, db: Session) -> None:
        user = _make_user(db, "partial@example.com")
        update_profile(db, user.id, {"headline": "Analyst", "github_url": "https://github.com/ada"})

        update_profile(db, user.id, {"location": "Paris"})

        row = _profile_row(db, user.id)
        assert row["headline"] == "Analyst"
        assert row["github_url"] == "https://github.com/ada"
        assert row["location"] == "Paris"

    def test_repeated_update_converges(self, db: Session) -> None:
        user = _make_user(db, "idempotent@example.com")
        fields = {"first_name": "Ada", "bio": "Poetical science", "website_url": ""}

        update_profile(db, user.id, fields)
        first_profile, first_user = _profile_row(db, user.id), _user_row(db, user.id)
        update_profile(db, user.id, fields)

        assert _profile_row(db, user.id) == first_profile
        assert _user_row(db, user.id) == first_user
        count = db.query(UserProfile).filter(UserProfile.user_id == user.id).count()
        assert count == 1

    def test_users_have_independent_rows(self, db: Session) -> None:
        ada = _make_user(db, "ada2@example.com")
        grace = _make_user(db, "grace@example.com", first_name="Grace", last_name="Hopper")

        update_profile(db, ada.id, {"headline": "Mathematician"})
        update_profile(db, grace.id, {"headline": "Rear Admiral"})

        assert _profile_row(db, ada.id)["headline"] == "Mathematician"
        assert _profile_row(db, grace.id)["headline"] == "Rear Admiral"

    def test_empty_update_is_rejected(self, db: Session) -> None:
        user = _make_user(db, "empty@example.com")
        with pytest.raises(EmptyUpdateError):
            update_profile(db, user.id, {})
        assert _profile_row(db, user.id) is None

    def test_failed_write_rolls_back_earlier_statement(self, db: Session) -> None:
        user = _make_user(db, "rollback@example.com")

        # phone_number is VARCHAR(32); bypass the validator to force a DB error
        with pytest.raises(PersistenceError):
            update_profile(db, user.id, {"first_name": "Changed", "phone_number": "1" * 64})

        assert _user_row(db, user.id)["first_name"] == "Ada"
        assert _profile_row(db, user.id) is None


class TestProfileApiPersistence:
    @pytest.fixture
    def api_client(self, db: Session):
        """TestClient with real DB session and real token auth."""
        from app.db.session import get_db
        from app.main import create_app

        app = create_app()

        def override_get_db():
            yield db

        app.dependency_overrides[get_db] = override_get_db
        client = TestClient(app)
        yield client
        app.dependency_overrides.clear()

    def test_put_then_get_round_trip(self, db: Session, api_client: TestClient) -> None:
        user = _make_user(db, "api@example.com")
        headers = {"Authorization": f"Bearer {create_user_token(user.id)}"}

        resp = api_client.put(
            "/profile",
            json={"lastName": "King", "bio": "Countess", "githubUrl": "https://github.com/ada"},
            headers=headers,
        )
        assert resp.status_code == 200

        resp = api_client.get("/profile", headers=headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["last_name"] == "King"
        assert data["bio"] == "Countess"
        assert data["github_url"] == "https://github.com/ada"
        assert data["headline"] is None

    def test_get_for_deleted_user_returns_404(self, db: Session, api_client: TestClient) -> None:
        headers = {"Authorization": f"Bearer {create_user_token(987654321)}"}
        resp = api_client.get("/profile", headers=headers)
        assert resp.status_code == 404

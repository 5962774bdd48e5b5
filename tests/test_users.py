"""
Tests for User Endpoints

Tests cover:
- GET/PUT /users/me - Own profile
- PUT /users/me/password - Change password
- PUT /users/me/profile-picture - Profile picture URL
- GET /users/me/reviews (+ /count) - Own reviews
- /users/me/watchlist - Add, list and remove movies
- Admin user management and role changes
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import Movie
from app.models.review import Review
from app.models.user import User
from app.services.security import create_access_token, verify_password


# =============================================================================
# Helper Functions
# =============================================================================


def get_auth_headers(user: User) -> dict:
    """Generate auth headers for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Test: GET /users/me
# =============================================================================


class TestGetCurrentUser:
    """Tests for GET /users/me endpoint."""

    def test_get_me_success(self, client: TestClient, sample_user: User):
        response = client.get("/api/v1/users/me", headers=get_auth_headers(sample_user))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == sample_user.id
        assert data["username"] == "testuser"
        assert data["role"] == "user"
        assert "hashed_password" not in data

    def test_get_me_unauthenticated(self, client: TestClient):
        response = client.get("/api/v1/users/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["www-authenticate"] == "Bearer"

    def test_get_me_invalid_token(self, client: TestClient):
        response = client.get(
            "/api/v1/users/me",
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Test: PUT /users/me
# =============================================================================


class TestUpdateProfile:
    """Tests for PUT /users/me endpoint."""

    def test_update_profile(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me",
            json={"username": "renamed_user", "email": "Renamed@Example.com"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] == "renamed_user"
        assert data["email"] == "renamed@example.com"

    def test_keep_own_values(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me",
            json={"username": sample_user.username, "email": sample_user.email},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK

    def test_username_taken(self, client: TestClient, sample_user: User, second_user: User):
        response = client.put(
            "/api/v1/users/me",
            json={"username": second_user.username, "email": sample_user.email},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Username is already taken"

    def test_email_taken(self, client: TestClient, sample_user: User, second_user: User):
        response = client.put(
            "/api/v1/users/me",
            json={"username": sample_user.username, "email": second_user.email},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email is already in use"

    def test_invalid_username(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me",
            json={"username": "no spaces!", "email": sample_user.email},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Test: PUT /users/me/password
# =============================================================================


class TestChangePassword:
    """Tests for PUT /users/me/password endpoint."""

    def test_change_password_success(
        self,
        client: TestClient,
        db_session: Session,
        sample_user: User,
    ):
        response = client.put(
            "/api/v1/users/me/password",
            json={"current_password": "password123", "new_password": "newsecret456"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Password updated successfully"}
        db_session.refresh(sample_user)
        assert verify_password("newsecret456", sample_user.hashed_password)

    def test_wrong_current_password(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me/password",
            json={"current_password": "wrongpass", "new_password": "newsecret456"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Current password is incorrect"

    def test_new_password_too_short(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me/password",
            json={"current_password": "password123", "new_password": "abc"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Test: PUT /users/me/profile-picture
# =============================================================================


class TestProfilePicture:
    """Tests for PUT /users/me/profile-picture endpoint."""

    def test_set_picture(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me/profile-picture",
            json={"profile_picture": "https://example.com/avatars/testuser.png"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["profile_picture"] == "https://example.com/avatars/testuser.png"

    def test_rejects_non_http_url(self, client: TestClient, sample_user: User):
        response = client.put(
            "/api/v1/users/me/profile-picture",
            json={"profile_picture": "javascript:alert(1)"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Test: GET /users/me/reviews
# =============================================================================


class TestUserReviews:
    """Tests for GET /users/me/reviews and /users/me/reviews/count."""

    def test_get_my_reviews(
        self,
        client: TestClient,
        sample_user: User,
        sample_review: Review,
        sample_movie: Movie,
    ):
        response = client.get("/api/v1/users/me/reviews", headers=get_auth_headers(sample_user))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == sample_review.id
        assert data[0]["movie"]["title"] == sample_movie.title
        assert data[0]["movie"]["average_rating"] == 4.0

    def test_no_reviews(self, client: TestClient, second_user: User, sample_review: Review):
        response = client.get("/api/v1/users/me/reviews", headers=get_auth_headers(second_user))

        assert response.json() == []

    def test_count(self, client: TestClient, sample_user: User, sample_review: Review):
        response = client.get(
            "/api/v1/users/me/reviews/count",
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"count": 1}


# =============================================================================
# Test: Watchlist
# =============================================================================


class TestWatchlist:
    """Tests for /users/me/watchlist endpoints."""

    def test_add_and_list(
        self,
        client: TestClient,
        sample_user: User,
        sample_movie: Movie,
        second_movie: Movie,
    ):
        headers = get_auth_headers(sample_user)

        first = client.post(f"/api/v1/users/me/watchlist/{sample_movie.id}", headers=headers)
        client.post(f"/api/v1/users/me/watchlist/{second_movie.id}", headers=headers)
        response = client.get("/api/v1/users/me/watchlist", headers=headers)

        assert first.status_code == status.HTTP_200_OK
        assert first.json() == {"message": "Movie added to watchlist", "movie_id": sample_movie.id}
        assert {m["id"] for m in response.json()} == {sample_movie.id, second_movie.id}

    def test_add_duplicate(self, client: TestClient, sample_user: User, sample_movie: Movie):
        headers = get_auth_headers(sample_user)
        client.post(f"/api/v1/users/me/watchlist/{sample_movie.id}", headers=headers)

        response = client.post(f"/api/v1/users/me/watchlist/{sample_movie.id}", headers=headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Movie already in watchlist"

    def test_add_missing_movie(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/users/me/watchlist/99999",
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_remove(self, client: TestClient, sample_user: User, sample_movie: Movie):
        headers = get_auth_headers(sample_user)
        client.post(f"/api/v1/users/me/watchlist/{sample_movie.id}", headers=headers)

        response = client.delete(f"/api/v1/users/me/watchlist/{sample_movie.id}", headers=headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Movie removed from watchlist"
        assert client.get("/api/v1/users/me/watchlist", headers=headers).json() == []

    def test_remove_absent_is_noop(self, client: TestClient, sample_user: User, sample_movie: Movie):
        response = client.delete(
            f"/api/v1/users/me/watchlist/{sample_movie.id}",
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK

    def test_watchlists_are_per_user(
        self,
        client: TestClient,
        sample_user: User,
        second_user: User,
        sample_movie: Movie,
    ):
        client.post(
            f"/api/v1/users/me/watchlist/{sample_movie.id}",
            headers=get_auth_headers(sample_user),
        )

        response = client.get("/api/v1/users/me/watchlist", headers=get_auth_headers(second_user))

        assert response.json() == []

    def test_requires_auth(self, client: TestClient):
        assert client.get("/api/v1/users/me/watchlist").status_code == 401


# =============================================================================
# Test: Admin Endpoints
# =============================================================================


class TestAdminUsers:
    """Tests for the admin-only /users endpoints."""

    def test_list_users(
        self,
        client: TestClient,
        admin_user: User,
        sample_user: User,
    ):
        response = client.get("/api/v1/users", headers=get_auth_headers(admin_user))

        assert response.status_code == status.HTTP_200_OK
        assert {u["username"] for u in response.json()} == {"admin", "testuser"}

    def test_list_users_forbidden(self, client: TestClient, sample_user: User):
        response = client.get("/api/v1/users", headers=get_auth_headers(sample_user))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Admin privileges required"

    def test_get_user(self, client: TestClient, admin_user: User, sample_user: User):
        response = client.get(
            f"/api/v1/users/{sample_user.id}",
            headers=get_auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "testuser@example.com"

    def test_get_user_not_found(self, client: TestClient, admin_user: User):
        response = client.get("/api/v1/users/99999", headers=get_auth_headers(admin_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_get_user_forbidden(self, client: TestClient, sample_user: User, second_user: User):
        response = client.get(
            f"/api/v1/users/{second_user.id}",
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_deactivate_user(self, client: TestClient, admin_user: User, sample_user: User):
        response = client.put(
            f"/api/v1/users/{sample_user.id}",
            json={"is_active": False},
            headers=get_auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_active"] is False

        me = client.get("/api/v1/users/me", headers=get_auth_headers(sample_user))
        assert me.status_code == status.HTTP_403_FORBIDDEN

    def test_update_user_conflict(
        self,
        client: TestClient,
        admin_user: User,
        sample_user: User,
        second_user: User,
    ):
        response = client.put(
            f"/api/v1/users/{sample_user.id}",
            json={"email": second_user.email},
            headers=get_auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_promote_user(self, client: TestClient, admin_user: User, sample_user: User):
        response = client.put(
            f"/api/v1/users/{sample_user.id}/role",
            json={"role": "admin"},
            headers=get_auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["role"] == "admin"

        # The promoted account can now use admin endpoints
        listing = client.get("/api/v1/users", headers=get_auth_headers(sample_user))
        assert listing.status_code == status.HTTP_200_OK

    def test_invalid_role(self, client: TestClient, admin_user: User, sample_user: User):
        response = client.put(
            f"/api/v1/users/{sample_user.id}/role",
            json={"role": "moderator"},
            headers=get_auth_headers(admin_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_change_role_forbidden(self, client: TestClient, sample_user: User):
        response = client.put(
            f"/api/v1/users/{sample_user.id}/role",
            json={"role": "admin"},
            headers=get_auth_headers(sample_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

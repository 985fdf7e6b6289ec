"""
Integration tests for Authentication API endpoints.
"""
from callhub.core.security import verify_access_token
from callhub.models.user import UserRole


class TestAuthAPI:
    """Test authentication API endpoints."""

    async def test_register(self, client):
        """Test registering a new account."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"name": "Dana", "email": "Dana@Example.com", "password": "hunter22"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Dana"
        assert data["email"] == "dana@example.com"
        assert data["role"] == "user"
        assert data["signalingToken"] == f"join-{data['userId']}"

        identity = verify_access_token(data["token"])
        assert identity.user_id == data["userId"]
        assert identity.role == UserRole.USER

    async def test_register_admin_email(self, client):
        """Test emails listed in ADMIN_EMAILS register as admins."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"name": "Root", "email": "admin@example.com", "password": "hunter22"}
        )

        assert response.status_code == 201
        assert response.json()["role"] == "admin"
        assert verify_access_token(response.json()["token"]).is_admin

    async def test_register_duplicate_email(self, client, test_user):
        """Test registering an existing email fails with 400."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"name": "Other", "email": "ALICE@example.com", "password": "hunter22"}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "User already exists with this email"}

    async def test_register_missing_fields(self, client):
        """Test missing fields fail with 400."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "nobody@example.com"}
        )

        assert response.status_code == 400
        assert "message" in response.json()

    async def test_register_malformed_email(self, client):
        """Test a malformed email fails with 400."""
        response = await client.post(
            "/api/v1/auth/register",
            json={"name": "X", "email": "not-an-email", "password": "hunter22"}
        )

        assert response.status_code == 400

    async def test_login(self, client, test_user):
        """Test logging in with valid credentials."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "password123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == test_user.id
        assert verify_access_token(data["token"]).user_id == test_user.id

    async def test_login_wrong_password(self, client, test_user):
        """Test a wrong password fails with 401."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    async def test_login_unknown_email(self, client):
        """Test an unknown email fails with the same 401."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "ghost@example.com", "password": "whatever"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    async def test_get_me(self, client, auth_headers, test_user):
        """Test reading the current user's profile."""
        response = await client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == test_user.id
        assert data["email"] == "alice@example.com"
        assert data["signalingToken"] == f"join-{test_user.id}"
        assert "password_hash" not in data

    async def test_get_me_requires_auth(self, client):
        """Test the profile endpoint rejects anonymous callers."""
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401

    async def test_validate_token(self, client, admin_headers, test_admin):
        """Test token validation echoes identity and role."""
        response = await client.post("/api/v1/auth/validate", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"valid": True, "userId": test_admin.id, "role": "admin"}


class TestHealthAPI:
    """Test health endpoints."""

    async def test_health(self, client):
        """Test the liveness endpoint."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

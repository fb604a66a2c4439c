from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from leaderboard.config import Settings
from leaderboard.main import create_app
from leaderboard.repositories.user_repository import UserRepository


@pytest.fixture
def client(tmp_path):
    """테스트 클라이언트 픽스처"""
    settings = Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}",
        LOG_FORMAT="simple",
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client


class TestUserRoutes:
    """사용자 라우터 테스트"""

    def test_add_user(self, client):
        # When
        response = client.post("/add-user", json={"name": "Ada"})

        # Then
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Ada"
        assert data["points"] == 0
        assert data["id"]

    def test_add_user_trims_name(self, client):
        response = client.post("/add-user", json={"name": "  Ada Lovelace  "})

        assert response.status_code == 201
        assert response.json()["name"] == "Ada Lovelace"

    @pytest.mark.parametrize("body", [{"name": "  "}, {"name": ""}, {}])
    def test_add_user_rejects_blank_name(self, client, body):
        """이름이 없거나 공백뿐이면 400, 사용자 생성 없음"""
        response = client.post("/add-user", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert client.get("/rankings").json() == []

    def test_add_user_without_body(self, client):
        """본문이 없으면 name 누락과 같은 400"""
        response = client.post("/add-user")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"
        assert client.get("/rankings").json() == []

    def test_add_user_null_body(self, client):
        response = client.post(
            "/add-user", content="null", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_add_user_rejects_non_string_name(self, client):
        response = client.post("/add-user", json={"name": 123})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_002"

    def test_add_user_storage_fault(self, client):
        with patch.object(
            UserRepository, "create_user", side_effect=SQLAlchemyError("db down")
        ):
            response = client.post("/add-user", json={"name": "Ada"})

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Error adding user"
        assert "db down" not in response.text

    def test_get_user(self, client):
        created = client.post("/add-user", json={"name": "Grace"}).json()

        response = client.get(f"/users/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_user(self, client):
        response = client.get("/users/nobody")

        assert response.status_code == 404


class TestRankingRoutes:
    """랭킹 라우터 테스트"""

    def test_rankings_reflect_claims(self, client):
        ada = client.post("/add-user", json={"name": "Ada"}).json()
        grace = client.post("/add-user", json={"name": "Grace"}).json()

        claimed = client.post("/claim-points", json={"userId": grace["id"]}).json()

        response = client.get("/rankings")
        assert response.status_code == 200
        rankings = response.json()
        assert [u["id"] for u in rankings] == [grace["id"], ada["id"]]
        assert rankings[0]["points"] == claimed["user"]["points"]
        assert rankings[1]["points"] == 0


class TestHealthRoutes:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello, World!"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "ok"}

    def test_unknown_route(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "HTTP_ERROR"

# backend/tests/routers/test_goals_api.py
"""Integration tests for the goals API."""

from decimal import Decimal

from fastapi.testclient import TestClient


class TestGoalsApi:
    def test_create_without_body(self, client: TestClient):
        """A goal can be created empty and filled in later."""
        response = client.post("/goals/")

        assert response.status_code == 201
        body = response.json()
        assert body["id"].startswith("goal_")
        assert body["name"] == "New goal"
        # No monthly contribution yet, so the target is out of reach
        assert body["projection"]["reachable"] is False

    def test_projection(self, client: TestClient):
        response = client.post("/goals/", json={"name": "Car", "target": "1300", "monthly": "100"})

        assert response.json()["projection"] == {
            "reachable": True,
            "months": 13,
            "years": 1,
            "remainder_months": 1,
        }

    def test_unreachable(self, client: TestClient):
        response = client.post("/goals/", json={"name": "Boat", "target": "5000", "monthly": "0"})

        projection = response.json()["projection"]
        assert projection["reachable"] is False
        assert projection["months"] is None

    def test_update_and_list(self, client: TestClient):
        goal = client.post("/goals/", json={"name": "Car", "target": "1200", "monthly": "100"}).json()

        response = client.patch(f"/goals/{goal['id']}", json={"name": " ", "monthly": "200"})

        assert response.status_code == 200
        assert response.json()["name"] == "Car"
        assert response.json()["projection"]["months"] == 6
        assert [g["id"] for g in client.get("/goals/").json()] == [goal["id"]]

    def test_negative_target_rejected(self, client: TestClient):
        assert client.post("/goals/", json={"target": "-1"}).status_code == 422

    def test_sub_cent_contribution_rejected(self, client: TestClient):
        """Amounts are kept in cents; 0.004 a month is refused instead of stored as 0."""
        response = client.post("/goals/", json={"target": "1", "monthly": "0.004"})

        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "body.monthly"
        assert client.get("/goals/").json() == []

    def test_sub_cent_update_rejected(self, client: TestClient):
        goal = client.post("/goals/", json={"target": "1", "monthly": "0.01"}).json()

        response = client.patch(f"/goals/{goal['id']}", json={"monthly": "0.004"})

        assert response.status_code == 422
        assert Decimal(client.get("/goals/").json()[0]["monthly"]) == Decimal("0.01")

    def test_one_cent_contribution_is_reachable(self, client: TestClient):
        response = client.post("/goals/", json={"target": "1", "monthly": "0.01"})

        assert response.status_code == 201
        assert response.json()["projection"]["reachable"] is True
        assert response.json()["projection"]["months"] == 100

    def test_delete(self, client: TestClient):
        goal = client.post("/goals/").json()

        assert client.delete(f"/goals/{goal['id']}").status_code == 204
        assert client.get("/goals/").json() == []

    def test_missing_goal(self, client: TestClient):
        response = client.patch("/goals/goal_missing", json={"name": "x"})

        assert response.status_code == 404
        assert response.json()["error"] == "GoalNotFoundError"

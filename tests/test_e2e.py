import concurrent.futures
import uuid

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from conftest import bearer
from smartsync.models.task import Task
from smartsync.models.user import User


class TestE2E:
    def test_complete_user_journey(self, make_client, db: Session):
        client: TestClient = make_client()
        email = f"user_{uuid.uuid4().hex[:8]}@example.com"
        password = "SecurePass123!"

        # 1. Registration
        r = client.post("/auth/register", json={"name": "Ana", "password": password})
        assert r.status_code == 400

        r = client.post("/auth/register", json={"name": "Ana", "email": email, "password": password})
        assert r.status_code == 200
        user_id = r.json()["userId"]

        # 2. Login from a second device that only uses the bearer channel
        device = make_client()
        r = device.post("/auth/login", json={"email": email, "password": "WrongPass123!"})
        assert r.status_code == 401
        r = device.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200
        token = r.json()["token"]
        device.cookies.clear()

        # 3. Tasks
        r = device.post("/tasks", json={"id": "t1", "text": "Mi primera tarea"})
        assert r.status_code == 401
        r = device.post("/tasks", json={"id": "t1", "text": "Mi primera tarea"}, headers=bearer("invalid"))
        assert r.status_code == 401
        r = device.post("/tasks", json={"id": "t1", "text": "Mi primera tarea", "dueDate": "2026-10-20T09:00"}, headers=bearer(token))
        assert r.status_code == 200

        # visible from the cookie-authenticated first client too
        r = client.get("/tasks")
        assert [t["id"] for t in r.json()] == ["t1"]

        stored = db.get(Task, "t1")
        assert stored.user_id == user_id
        assert stored.completed is False

        # 4. Isolation
        other = make_client()
        r = other.post("/auth/register", json={"name": "Bob", "email": f"other_{uuid.uuid4().hex[:8]}@example.com", "password": "pw"})
        assert r.status_code == 200
        assert other.get("/tasks").json() == []
        assert other.delete("/tasks/t1").status_code == 200
        assert len(client.get("/tasks").json()) == 1

        # 5. Completion and cleanup
        assert client.put("/tasks/t1", json={"completed": True}).status_code == 200
        assert client.get("/tasks").json()[0]["completed"] is True
        assert client.delete("/tasks/t1").status_code == 200
        assert client.get("/tasks").json() == []

        # 6. Premium upgrade
        assert client.put("/user/branding", json={"brandName": "Ana Co"}).status_code == 403
        assert client.post("/finance/confirm-payment").status_code == 200
        assert client.put("/user/branding", json={"brandName": "Ana Co"}).status_code == 200
        db.expire_all()
        assert db.get(User, user_id).brand_name == "Ana Co"

        # 7. Logout only ends the cookie session
        assert client.post("/auth/logout").status_code == 200
        assert client.get("/auth/status").json() == {"isAuthenticated": False}
        assert device.get("/auth/status", headers=bearer(token)).json()["isAuthenticated"] is True

    def test_concurrent_operations(self, make_client, register):
        client = make_client()
        token = register(client)

        def create_task(i):
            return client.post("/tasks", json={"id": f"c{i}", "text": f"Concurrent Task {i}"}, headers=bearer(token))

        with concurrent.futures.ThreadPoolExecutor(max_workers=3) as executor:
            responses = list(executor.map(create_task, range(5)))

        assert all(r.status_code == 200 for r in responses)
        tasks = client.get("/tasks", headers=bearer(token)).json()
        assert {t["text"] for t in tasks} == {f"Concurrent Task {i}" for i in range(5)}


import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user

DEPARTMENT = Obj(id=3, company_id=1, name="R&D")


def jobrole(**overrides):
    data = dict(id=1, department_id=3, title="Engineer", job_id="RD-001", status="vacant")
    data.update(overrides)
    return Obj(**data)


class JobRoleRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        self.user = Obj(id=1, company_id=1, role=Obj(name="superuser", level=1))
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_active_user] = lambda: self.user

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)

    # --- LIST ---

    @patch("jobrole.router.service.get_jobroles")
    @patch("jobrole.router.get_department_for_company")
    def test_list_jobroles_happy_path(self, mock_dept, mock_get):
        mock_dept.return_value = DEPARTMENT
        mock_get.return_value = [jobrole()]
        resp = self.client.get("/api/departments/3/job-roles")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), [{
            "id": 1, "department_id": 3, "title": "Engineer", "job_id": "RD-001",
            "description": None, "status": "vacant", "assigned_employee_id": None,
        }])

    @patch("jobrole.router.get_department_for_company")
    def test_list_jobroles_unknown_department_404(self, mock_dept):
        mock_dept.return_value = None
        resp = self.client.get("/api/departments/99/job-roles")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "department not found")

    # --- CREATE ---

    @patch("jobrole.router.service.create_jobrole")
    @patch("jobrole.router.get_department_for_company")
    def test_create_jobrole_201(self, mock_dept, mock_create):
        mock_dept.return_value = DEPARTMENT
        mock_create.return_value = jobrole(id=10, status="filled", assigned_employee_id=7)
        resp = self.client.post("/api/departments/3/job-roles", json={
            "title": "Engineer", "job_id": "RD-001", "assigned_employee_id": 7,
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["status"], "filled")
        internal = mock_create.call_args.args[1]
        self.assertEqual(internal.department_id, 3)

    def test_create_jobrole_422_if_client_sends_department_id(self):
        resp = self.client.post("/api/departments/3/job-roles", json={
            "title": "Engineer", "job_id": "RD-001", "department_id": 4,
        })
        self.assertEqual(resp.status_code, 422)

    @patch("jobrole.router.service.create_jobrole")
    @patch("jobrole.router.get_department_for_company")
    def test_create_jobrole_409_duplicate_job_id(self, mock_dept, mock_create):
        mock_dept.return_value = DEPARTMENT
        mock_create.side_effect = IntegrityError("stmt", "params", Exception("dup"))
        resp = self.client.post("/api/departments/3/job-roles", json={"title": "Engineer", "job_id": "RD-001"})
        self.assertEqual(resp.status_code, 409, resp.text)
        self.assertEqual(resp.json()["detail"], "job id already exists")

    def test_create_jobrole_needs_permission(self):
        self.user.role = Obj(name="manager", level=3)
        resp = self.client.post("/api/departments/3/job-roles", json={"title": "Engineer", "job_id": "RD-001"})
        self.assertEqual(resp.status_code, 403)

    # --- GET /{id} ---

    @patch("jobrole.router.service.get_jobrole_for_company")
    def test_get_jobrole_200(self, mock_get):
        mock_get.return_value = jobrole()
        resp = self.client.get("/api/job-roles/1")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["job_id"], "RD-001")

    @patch("jobrole.router.service.get_jobrole_for_company")
    def test_get_jobrole_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/job-roles/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "job role not found")

    # --- PATCH /{id} ---

    @patch("jobrole.router.service.update_jobrole")
    @patch("jobrole.router.service.get_jobrole_for_company")
    def test_update_jobrole_200(self, mock_get, mock_update):
        mock_get.return_value = jobrole()
        mock_update.return_value = jobrole(title="Senior Engineer")
        resp = self.client.patch("/api/job-roles/1", json={"title": "Senior Engineer"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["title"], "Senior Engineer")

    @patch("jobrole.router.service.get_jobrole_for_company")
    def test_update_jobrole_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.patch("/api/job-roles/999", json={"title": "Nope"})
        self.assertEqual(resp.status_code, 404)

    # --- DELETE /{id} ---

    @patch("jobrole.router.service.delete_jobrole")
    @patch("jobrole.router.service.get_jobrole_for_company")
    def test_delete_jobrole_200(self, mock_get, mock_delete):
        mock_get.return_value = jobrole()
        resp = self.client.delete("/api/job-roles/1")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), {"message": "job role deleted"})
        mock_delete.assert_called_once()

    @patch("jobrole.router.service.get_jobrole_for_company")
    def test_delete_jobrole_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.delete("/api/job-roles/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "job role not found")

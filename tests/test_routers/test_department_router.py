import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user


def department(**overrides):
    data = dict(id=3, company_id=1, name="R&D", is_active=True)
    data.update(overrides)
    return Obj(**data)


class DepartmentRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        self.user = Obj(id=1, company_id=1, role=Obj(name="admin", level=2))
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_active_user] = lambda: self.user

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)

    @patch("department.router.service.get_departments")
    def test_list_departments(self, mock_get):
        mock_get.return_value = [department(), department(id=4, name="Sales")]
        resp = self.client.get("/api/companies/1/departments")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual([d["name"] for d in resp.json()], ["R&D", "Sales"])

    def test_list_departments_other_company_403(self):
        resp = self.client.get("/api/companies/2/departments")
        self.assertEqual(resp.status_code, 403)

    @patch("department.router.service.create_department")
    def test_create_department_201(self, mock_create):
        mock_create.return_value = department(name="Finance")
        resp = self.client.post("/api/companies/1/departments", json={"name": "Finance"})
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(mock_create.call_args.args[1].company_id, 1)

    def test_create_department_422_if_client_sends_company_id(self):
        resp = self.client.post("/api/companies/1/departments", json={"name": "Finance", "company_id": 2})
        self.assertEqual(resp.status_code, 422)

    @patch("department.router.service.create_department")
    def test_create_department_409_duplicate(self, mock_create):
        mock_create.side_effect = IntegrityError("stmt", "params", Exception("dup"))
        resp = self.client.post("/api/companies/1/departments", json={"name": "R&D"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["detail"], "department already exists in this company")

    def test_create_department_needs_permission(self):
        self.user.role = Obj(name="manager", level=3)
        resp = self.client.post("/api/companies/1/departments", json={"name": "Finance"})
        self.assertEqual(resp.status_code, 403)

    @patch("department.router.service.get_department_for_company")
    def test_get_department_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/departments/99")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "department not found")

    @patch("department.router.service.get_department_details")
    @patch("department.router.service.get_department_for_company")
    def test_department_details(self, mock_get, mock_details):
        mock_get.return_value = department()
        mock_details.return_value = {
            "id": 3, "company_id": 1, "name": "R&D", "is_active": True,
            "job_roles": [{"id": 1, "department_id": 3, "title": "Engineer", "job_id": "RD-001", "status": "filled"}],
            "vacant_count": 0, "filled_count": 1,
        }
        resp = self.client.get("/api/departments/3/details")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["filled_count"], 1)
        self.assertEqual(resp.json()["job_roles"][0]["job_id"], "RD-001")

    @patch("department.router.service.update_department")
    @patch("department.router.service.get_department_for_company")
    def test_update_department(self, mock_get, mock_update):
        mock_get.return_value = department()
        mock_update.return_value = department(name="Research")
        resp = self.client.patch("/api/departments/3", json={"name": "Research"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["name"], "Research")

    @patch("department.router.service.delete_department")
    @patch("department.router.service.get_department_for_company")
    def test_delete_department_with_job_roles_409(self, mock_get, mock_delete):
        mock_get.return_value = department()
        mock_delete.side_effect = HTTPException(status_code=409, detail="department still has job roles")
        resp = self.client.delete("/api/departments/3")
        self.assertEqual(resp.status_code, 409)

    @patch("department.router.service.delete_department")
    @patch("department.router.service.get_department_for_company")
    def test_delete_department(self, mock_get, mock_delete):
        mock_get.return_value = department()
        resp = self.client.delete("/api/departments/3")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "department deleted"})

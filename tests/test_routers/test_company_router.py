import unittest
from decimal import Decimal
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user

COMPANY = Obj(id=1, name="Acme Ltd", setup_completed=False)
SETTINGS = Obj(
    default_notice_period_weeks=4, working_hours_per_week=Decimal("37.5"), working_days_per_week=5,
    leave_entitlement_days=25, probation_period_months=6, currency="GBP", timezone="Europe/London",
)


class CompanyRouterTests(unittest.TestCase):
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

    @patch("company.router.service.get_company")
    def test_list_only_own_company(self, mock_get):
        mock_get.return_value = COMPANY
        resp = self.client.get("/api/companies")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual([c["id"] for c in resp.json()], [1])
        self.assertEqual(mock_get.call_args.args[1], 1)

    def test_other_company_403(self):
        resp = self.client.get("/api/companies/2")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["detail"], "access denied to this company")

    @patch("company.router.service.get_company", return_value=None)
    def test_company_404(self, _mock_get):
        resp = self.client.get("/api/companies/1")
        self.assertEqual(resp.status_code, 404)

    @patch("company.router.service.update_company")
    def test_update_company(self, mock_update):
        mock_update.return_value = Obj(id=1, name="Acme Group", setup_completed=False)
        resp = self.client.patch("/api/companies/1", json={"name": "Acme Group"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["name"], "Acme Group")

    def test_admin_cannot_update_company(self):
        self.user.role = Obj(name="admin", level=2)
        resp = self.client.patch("/api/companies/1", json={"name": "Acme Group"})
        self.assertEqual(resp.status_code, 403)

    @patch("company.router.service.complete_setup")
    def test_setup_wizard(self, mock_setup):
        mock_setup.return_value = Obj(id=1, name="Acme Ltd", setup_completed=True)
        resp = self.client.post("/api/companies/1/setup", json={
            "company": {"industry": "Manufacturing"},
            "settings": {"leave_entitlement_days": 28},
            "departments": [{"name": "R&D"}, {"name": "Sales"}],
        })
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["setup_completed"])
        payload = mock_setup.call_args.args[2]
        self.assertEqual([d.name for d in payload.departments], ["R&D", "Sales"])

    @patch("company.router.service.get_settings")
    def test_get_settings(self, mock_get):
        mock_get.return_value = SETTINGS
        resp = self.client.get("/api/companies/1/settings")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["currency"], "GBP")

    def test_settings_validation(self):
        resp = self.client.patch("/api/companies/1/settings", json={"working_days_per_week": 8})
        self.assertEqual(resp.status_code, 422)

    @patch("company.router.service.get_company_stats")
    def test_stats(self, mock_stats):
        mock_stats.return_value = {"total_employees": 3, "active_contracts": 2, "pending_onboarding": 1, "contract_renewals": 0}
        resp = self.client.get("/api/companies/1/stats")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["total_employees"], 3)

    def test_stats_need_reporting_permission(self):
        self.user.role = Obj(name="employee", level=4)
        resp = self.client.get("/api/companies/1/stats")
        self.assertEqual(resp.status_code, 403)
        self.assertIn("view_reports", resp.json()["detail"])

    @patch("role.router.service.get_roles")
    def test_assignable_roles_use_caller_level(self, mock_roles):
        self.user.role = Obj(name="admin", level=2)
        mock_roles.return_value = [Obj(id=2, name="admin", level=2, permissions=[])]
        resp = self.client.get("/api/companies/1/roles", params={"assignable": "true"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(mock_roles.call_args.kwargs, {"min_level": 2})

import unittest

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401
from company.models import Company
from department.models import Department
from department import service
from department.schemas import DepartmentCreate, DepartmentUpdate
from jobrole.models import JobRole, JobRoleStatus
from role.service import ensure_default_roles
from user.models import User


class DepartmentServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db: Session = TestingSession()

        roles = ensure_default_roles(self.db)
        c1 = Company(name="Acme Ltd")
        c2 = Company(name="Other plc")
        self.db.add_all([c1, c2])
        self.db.flush()
        self.c1_id, self.c2_id = c1.id, c2.id

        self.manager = User(
            email="boss@example.com", password_hash="x", first_name="B", last_name="Oss",
            company_id=c1.id, role_id=roles["manager"].id,
        )
        self.outsider = User(
            email="out@example.com", password_hash="x", first_name="O", last_name="Ut",
            company_id=c2.id, role_id=roles["manager"].id,
        )
        d1 = Department(company_id=c1.id, name="Sales")
        d2 = Department(company_id=c1.id, name="Finance", is_active=False)
        d3 = Department(company_id=c2.id, name="Security")
        self.db.add_all([self.manager, self.outsider, d1, d2, d3])
        self.db.commit()
        self.d1_id, self.d2_id, self.d3_id = d1.id, d2.id, d3.id

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    # ---- list / get ----
    def test_get_departments_sorted_by_name(self):
        rows = service.get_departments(self.db, company_id=self.c1_id)
        self.assertEqual([d.name for d in rows], ["Finance", "Sales"])

    def test_get_departments_active_only(self):
        rows = service.get_departments(self.db, company_id=self.c1_id, include_inactive=False)
        self.assertEqual([d.name for d in rows], ["Sales"])

    def test_get_department_for_company_mismatch(self):
        self.assertIsNone(service.get_department_for_company(self.db, self.d3_id, self.c1_id))
        self.assertIsNotNone(service.get_department_for_company(self.db, self.d1_id, self.c1_id))

    # ---- create ----
    def test_create_department_with_manager(self):
        row = service.create_department(
            self.db, DepartmentCreate(company_id=self.c1_id, name="Support", department_code="SUP", manager_id=self.manager.id)
        )
        self.assertEqual(row.manager_id, self.manager.id)
        self.assertTrue(row.is_active)

    def test_create_department_manager_from_other_company_422(self):
        with self.assertRaises(HTTPException) as ctx:
            service.create_department(self.db, DepartmentCreate(company_id=self.c1_id, name="X", manager_id=self.outsider.id))
        self.assertEqual(ctx.exception.status_code, 422)

    # ---- update ----
    def test_update_department(self):
        row = service.update_department(self.db, self.d1_id, DepartmentUpdate(description="Revenue"))
        self.assertEqual(row.description, "Revenue")
        self.assertEqual(row.name, "Sales")

    def test_update_department_duplicate_name_409(self):
        with self.assertRaises(HTTPException) as ctx:
            service.update_department(self.db, self.d1_id, DepartmentUpdate(name="Finance"))
        self.assertEqual(ctx.exception.status_code, 409)

    def test_update_department_404(self):
        with self.assertRaises(HTTPException) as ctx:
            service.update_department(self.db, 9999, DepartmentUpdate(name="x"))
        self.assertEqual(ctx.exception.status_code, 404)

    # ---- delete ----
    def test_delete_empty_department(self):
        service.delete_department(self.db, self.d2_id)
        self.assertIsNone(service.get_department(self.db, self.d2_id))

    def test_delete_department_with_job_roles_409(self):
        self.db.add(JobRole(department_id=self.d1_id, title="Rep", job_id="S-1"))
        self.db.commit()
        with self.assertRaises(HTTPException) as ctx:
            service.delete_department(self.db, self.d1_id)
        self.assertEqual(ctx.exception.status_code, 409)

    # ---- details ----
    def test_department_details_counts(self):
        self.db.add_all([
            JobRole(department_id=self.d1_id, title="Rep", job_id="S-1"),
            JobRole(department_id=self.d1_id, title="Lead", job_id="S-2", status=JobRoleStatus.filled),
            JobRole(department_id=self.d1_id, title="Intern", job_id="S-3"),
        ])
        self.db.commit()
        dept = service.get_department(self.db, self.d1_id)
        details = service.get_department_details(self.db, dept)
        self.assertEqual(details.vacant_count, 2)
        self.assertEqual(details.filled_count, 1)
        self.assertEqual([r.title for r in details.job_roles], ["Intern", "Lead", "Rep"])


if __name__ == "__main__":
    unittest.main()

import unittest
from datetime import date
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401
from company.models import Company
from contract.models import Contract
from department.models import Department
from employee.models import Employee, Employment
from employee import service
from employee.schema import EmployeeCreatePayload, EmployeeUpdate, EmploymentStatusChange
from jobrole.models import JobRole, JobRoleStatus


def onboarding(company_id, **overrides):
    data = {
        "company_id": company_id,
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "Jane.Doe@Example.com",
        "emergency_contact": {"name": "John Doe", "phone": "07700 900000", "relationship": "Spouse"},
        "employment": {
            "job_title": "Engineer",
            "department": "R&D",
            "employment_status": "Full-Time",
            "base_salary": "35000",
            "pay_frequency": "annually",
            "start_date": "2025-03-01",
            "location": "Leeds",
            "benefits": ["Pension"],
        },
    }
    data.update(overrides)
    return EmployeeCreatePayload(**data)


class EmployeeServiceTests(unittest.TestCase):
    def setUp(self):
        # Fresh in-memory DB
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db: Session = TestingSession()

        # --- seed companies ---
        c1 = Company(name="Acme Ltd")
        c2 = Company(name="Other plc")
        self.db.add_all([c1, c2])
        self.db.commit()
        self.c1_id, self.c2_id = c1.id, c2.id

        # --- seed employees ---
        self.jane = service.create_employee(self.db, onboarding(self.c1_id))
        self.bob = service.create_employee(
            self.db, onboarding(self.c1_id, first_name="Bob", last_name="Smith", email="bob@example.com")
        )
        self.zed = service.create_employee(
            self.db, onboarding(self.c2_id, first_name="Zed", last_name="Doe", email="zed@example.com")
        )

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    # ---- create ----
    def test_create_employee_with_employment(self):
        self.assertEqual(self.jane.email, "jane.doe@example.com")
        self.assertEqual(self.jane.employee_code, f"EMP-{self.jane.id:04d}")
        self.assertIsNotNone(self.jane.employment)
        self.assertEqual(self.jane.employment.company_id, self.c1_id)
        self.assertEqual(self.jane.employment.base_salary, Decimal("35000"))
        self.assertEqual(self.jane.employment.start_date, date(2025, 3, 1))
        self.assertEqual(self.jane.employment.status, "active")
        self.assertEqual(self.jane.emergency_contact["relationship"], "Spouse")

    def test_create_employee_keeps_given_code(self):
        row = service.create_employee(self.db, onboarding(self.c1_id, employee_code="ACME-9", email="x@example.com"))
        self.assertEqual(row.employee_code, "ACME-9")

    def test_create_employee_duplicate_code_409(self):
        with self.assertRaises(HTTPException) as ctx:
            service.create_employee(self.db, onboarding(self.c1_id, employee_code=self.jane.employee_code))
        self.assertEqual(ctx.exception.status_code, 409)
        # nothing half-written
        self.assertEqual(len(list(self.db.scalars(select(Employment)))), 3)

    def test_onboarding_requires_employment_fields(self):
        with self.assertRaises(ValueError):
            EmployeeCreatePayload(company_id=1, first_name="A", last_name="B", email="a@example.com",
                                  employment={"job_title": "X"})

    # ---- list / search ----
    def test_get_employees_scoped_to_company(self):
        rows = service.get_employees(self.db, company_id=self.c1_id)
        self.assertEqual([e.first_name for e in rows], ["Jane", "Bob"])

    def test_search_matches_name_email_and_code(self):
        self.assertEqual([e.id for e in service.get_employees(self.db, company_id=self.c1_id, search="smith")], [self.bob.id])
        self.assertEqual([e.id for e in service.get_employees(self.db, company_id=self.c1_id, search="JANE DOE")], [self.jane.id])
        self.assertEqual([e.id for e in service.get_employees(self.db, company_id=self.c1_id, search="bob@")], [self.bob.id])
        code = self.jane.employee_code.lower()
        self.assertEqual([e.id for e in service.get_employees(self.db, company_id=self.c1_id, search=code)], [self.jane.id])
        # Zed Doe lives in the other company
        self.assertEqual([e.id for e in service.get_employees(self.db, company_id=self.c1_id, search="doe")], [self.jane.id])

    def test_get_employee_for_company_mismatch(self):
        self.assertIsNone(service.get_employee_for_company(self.db, self.zed.id, self.c1_id))

    # ---- update ----
    def test_update_employee_and_employment(self):
        row = service.update_employee(
            self.db, self.jane.id, EmployeeUpdate(phone="0113", employment={"job_title": "Lead Engineer"})
        )
        self.assertEqual(row.phone, "0113")
        self.assertEqual(row.employment.job_title, "Lead Engineer")
        self.assertEqual(row.employment.location, "Leeds")

    def test_update_ignores_null_for_required_fields(self):
        row = service.update_employee(
            self.db,
            self.jane.id,
            EmployeeUpdate(first_name=None, phone=None, employment={"job_title": None, "start_date": None, "manager": None}),
        )
        self.assertEqual(row.first_name, "Jane")
        self.assertIsNone(row.phone)
        self.assertEqual(row.employment.job_title, "Engineer")
        self.assertEqual(row.employment.start_date, date(2025, 3, 1))

    def test_update_employee_not_found(self):
        self.assertIsNone(service.update_employee(self.db, 99999, EmployeeUpdate(phone="1")))

    # ---- status ----
    def test_change_status(self):
        change = EmploymentStatusChange(
            status="suspended", status_date=date(2025, 5, 1), status_manager="Olive Owner",
            status_reason="Investigation", status_notes="Pending review",
        )
        row = service.change_status(self.db, self.jane.id, change)
        self.assertEqual(row.status, "suspended")
        self.assertEqual(row.status_change_date, date(2025, 5, 1))
        self.assertEqual(row.status_change_reason, "Investigation")

    def test_change_status_rejects_unknown_value(self):
        with self.assertRaises(ValueError):
            EmploymentStatusChange(status="pending", status_date=date(2025, 5, 1), status_manager="x", status_reason="y")

    # ---- delete ----
    def test_delete_employee_removes_employment_contracts_and_frees_roles(self):
        dept = Department(company_id=self.c1_id, name="R&D")
        self.db.add(dept)
        self.db.flush()
        role = JobRole(department_id=dept.id, title="Engineer", job_id="RD-1",
                       status=JobRoleStatus.filled, assigned_employee_id=self.jane.id)
        contract = Contract(employee_id=self.jane.id, company_id=self.c1_id, template_name="T",
                            file_name="Jane_Doe_Contract.docx", file_content=b"x")
        self.db.add_all([role, contract])
        self.db.commit()
        jane_id = self.jane.id

        service.delete_employee(self.db, jane_id)

        self.assertIsNone(service.get_employee(self.db, jane_id))
        self.assertIsNone(self.db.scalars(select(Employment).where(Employment.employee_id == jane_id)).first())
        self.assertIsNone(self.db.scalars(select(Contract).where(Contract.employee_id == jane_id)).first())
        role = self.db.get(JobRole, role.id)
        self.assertEqual(role.status, JobRoleStatus.vacant)
        self.assertIsNone(role.assigned_employee_id)


if __name__ == "__main__":
    unittest.main()

"""initial schema: companies, users, employees, contracts

Revision ID: 3c1f0a9e7b21
Revises:
Create Date: 2026-10-19 10:02:11.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f0a9e7b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("industry", sa.String(128), nullable=True),
        sa.Column("size", sa.String(64), nullable=True),
        sa.Column("company_number", sa.String(32), nullable=True),
        sa.Column("setup_completed", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "company_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("default_notice_period_weeks", sa.Integer(), nullable=False),
        sa.Column("working_hours_per_week", sa.Numeric(4, 2), nullable=False),
        sa.Column("working_days_per_week", sa.Integer(), nullable=False),
        sa.Column("leave_entitlement_days", sa.Integer(), nullable=False),
        sa.Column("probation_period_months", sa.Integer(), nullable=False),
        sa.Column("public_holidays", sa.JSON(), nullable=True),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False),
    )
    op.create_index("ix_company_settings_company_id", "company_settings", ["company_id"], unique=True)

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(32), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # manager_id -> users is added after users exists
    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("department_code", sa.String(32), nullable=True, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("manager_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("company_id", "name", name="uq_department_company_name"),
    )
    op.create_index("ix_departments_company_id", "departments", ["company_id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("employee_code", sa.String(32), nullable=True, unique=True),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("national_insurance_number", sa.String(16), nullable=True),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("marital_status", sa.String(32), nullable=True),
        sa.Column("emergency_contact", sa.JSON(), nullable=True),
        sa.Column("passport_number", sa.String(32), nullable=True),
        sa.Column("passport_issue_date", sa.Date(), nullable=True),
        sa.Column("passport_expiry_date", sa.Date(), nullable=True),
        sa.Column("visa_issue_date", sa.Date(), nullable=True),
        sa.Column("visa_expiry_date", sa.Date(), nullable=True),
        sa.Column("visa_category", sa.String(64), nullable=True),
        sa.Column("dbs_certificate_number", sa.String(32), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_employees_company_id", "employees", ["company_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("email_verified", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("roles.id"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_company_id", "users", ["company_id"])
    op.create_index("ix_users_role_id", "users", ["role_id"])

    with op.batch_alter_table("departments") as batch:
        batch.create_foreign_key("fk_departments_manager_id_users", "users", ["manager_id"], ["id"], ondelete="SET NULL")

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])

    op.create_table(
        "job_roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("job_id", sa.String(64), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.Enum("vacant", "filled", name="job_role_status"), nullable=False),
        sa.Column("assigned_employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_job_roles_department_id", "job_roles", ["department_id"])
    op.create_index("ix_job_roles_status", "job_roles", ["status"])

    op.create_table(
        "employments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("job_title", sa.String(255), nullable=False),
        sa.Column("department", sa.String(255), nullable=False),
        sa.Column("manager", sa.String(255), nullable=True),
        sa.Column("employment_status", sa.String(32), nullable=False),
        sa.Column("base_salary", sa.Numeric(10, 2), nullable=True),
        sa.Column("pay_frequency", sa.String(32), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("weekly_hours", sa.String(16), nullable=True),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("tax_code", sa.String(64), nullable=True),
        sa.Column("benefits", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("status_change_date", sa.Date(), nullable=True),
        sa.Column("status_change_manager", sa.String(255), nullable=True),
        sa.Column("status_change_reason", sa.Text(), nullable=True),
        sa.Column("status_change_notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_employments_employee_id", "employments", ["employee_id"], unique=True)
    op.create_index("ix_employments_company_id", "employments", ["company_id"])

    op.create_table(
        "contract_templates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_content", sa.LargeBinary(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("uploaded_by", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_contract_templates_company_id", "contract_templates", ["company_id"])

    op.create_table(
        "contracts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("template_id", sa.Integer(), sa.ForeignKey("contract_templates.id", ondelete="SET NULL"), nullable=True),
        sa.Column("template_name", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_content", sa.LargeBinary(), nullable=False),
        sa.Column("notice_weeks", sa.Integer(), nullable=True),
        sa.Column("contract_date", sa.Date(), nullable=True),
        sa.Column("probation_period", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_contracts_employee_id", "contracts", ["employee_id"])
    op.create_index("ix_contracts_company_id", "contracts", ["company_id"])


def downgrade() -> None:
    op.drop_table("contracts")
    op.drop_table("contract_templates")
    op.drop_table("employments")
    op.drop_table("job_roles")
    op.drop_table("refresh_tokens")
    with op.batch_alter_table("departments") as batch:
        batch.drop_constraint("fk_departments_manager_id_users", type_="foreignkey")
    op.drop_table("users")
    op.drop_table("employees")
    op.drop_table("departments")
    op.drop_table("roles")
    op.drop_table("company_settings")
    op.drop_table("companies")
    sa.Enum(name="job_role_status").drop(op.get_bind(), checkfirst=True)

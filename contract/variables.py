"""Builds the placeholder value map for one contract.

Keys are camelCase; :mod:`contract.matching` takes care of the other
spellings. Every value is already a display string.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from .address import parse_address
from .formatting import (
    age_on,
    format_date,
    format_hours,
    format_long_date,
    format_money,
    leading_number,
    pluralize,
    title_case,
    to_decimal,
)

DEFAULT_MANAGER = "Management"
DEFAULT_STATUS = "active"
DEFAULT_BASE_SALARY = "0"

# used when the company has no settings row
UK_DEFAULTS = {
    "default_notice_period_weeks": 4,
    "working_hours_per_week": Decimal("37.5"),
    "working_days_per_week": 5,
    "leave_entitlement_days": 25,
    "probation_period_months": 6,
    "currency": "GBP",
}

PERIODS_PER_YEAR = {
    "annually": 1,
    "annual": 1,
    "yearly": 1,
    "monthly": 12,
    "four-weekly": 13,
    "4-weekly": 13,
    "bi-weekly": 26,
    "biweekly": 26,
    "fortnightly": 26,
    "weekly": 52,
}


@dataclass
class ContractTerms:
    """Per-contract values supplied when generating."""
    notice_weeks: Optional[int] = None
    contract_date: Optional[date] = None
    probation_period: Optional[str] = None
    special_terms: Optional[str] = None


def _setting(settings, name: str):
    value = getattr(settings, name, None) if settings is not None else None
    return UK_DEFAULTS[name] if value is None else value


def _s(value) -> str:
    return "" if value is None else str(value)


def annual_salary(base: Optional[Decimal], pay_frequency: Optional[str], weekly_hours: Optional[Decimal]) -> Optional[Decimal]:
    if base is None or not pay_frequency:
        return None
    freq = pay_frequency.strip().lower()
    if freq == "hourly":
        return base * weekly_hours * 52 if weekly_hours else None
    periods = PERIODS_PER_YEAR.get(freq)
    return base * periods if periods else None


def build_contract_variables(employee, company=None, settings=None, terms: Optional[ContractTerms] = None, *, today: Optional[date] = None) -> dict[str, str]:
    today = today or date.today()
    terms = terms or ContractTerms()
    company = company if company is not None else employee.company
    if settings is None and company is not None:
        settings = company.settings
    employment = employee.employment
    currency = _setting(settings, "currency")

    first = employee.first_name or ""
    last = employee.last_name or ""
    emergency = employee.emergency_contact or {}
    home = parse_address(employee.address)

    values = {
        "firstName": first,
        "lastName": last,
        "fullName": f"{first} {last}".strip(),
        "firstNameTitle": title_case(first),
        "lastNameTitle": title_case(last),
        "fullNameTitle": title_case(f"{first} {last}"),
        "lastNameUpper": last.upper(),
        "initials": "".join(p[0].upper() for p in (first, last) if p),
        "employeeCode": _s(employee.employee_code),
        "email": _s(employee.email),
        "phone": _s(employee.phone),
        "address": _s(employee.address),
        "addressLine1": home.line1,
        "addressLine2": home.line2,
        "town": home.town,
        "county": home.county,
        "postcode": home.postcode,
        "country": home.country,
        "addressSingleLine": home.single_line(),
        "addressMultiLine": home.multi_line(),
        "dateOfBirth": format_date(employee.date_of_birth),
        "dateOfBirthLong": format_long_date(employee.date_of_birth),
        "age": age_on(employee.date_of_birth, today),
        "nationalInsuranceNumber": _s(employee.national_insurance_number).upper(),
        "gender": _s(employee.gender),
        "maritalStatus": _s(employee.marital_status),
        "emergencyContactName": _s(emergency.get("name")),
        "emergencyContactPhone": _s(emergency.get("phone")),
        "emergencyContactRelationship": _s(emergency.get("relationship")),
        "passportNumber": _s(employee.passport_number),
        "passportIssueDate": format_date(employee.passport_issue_date),
        "passportExpiryDate": format_date(employee.passport_expiry_date),
        "visaIssueDate": format_date(employee.visa_issue_date),
        "visaExpiryDate": format_date(employee.visa_expiry_date),
        "visaCategory": _s(employee.visa_category),
        "dbsCertificateNumber": _s(employee.dbs_certificate_number),
    }

    # employment
    # weekly hours are free text; the company default only fills a blank
    hours_text = _s(employment.weekly_hours if employment else None).strip()
    if hours_text:
        weekly_hours = to_decimal(hours_text)
        hours_display = format_hours(weekly_hours) if weekly_hours is not None else hours_text
        if weekly_hours is None:
            weekly_hours = leading_number(hours_text)
    else:
        weekly_hours = to_decimal(_setting(settings, "working_hours_per_week"))
        hours_display = format_hours(weekly_hours)
    base = to_decimal(employment.base_salary if employment else None)
    pay_frequency = employment.pay_frequency if employment else None
    annual = annual_salary(base, pay_frequency, weekly_hours)

    values.update({
        "jobTitle": _s(employment.job_title if employment else None),
        "department": _s(employment.department if employment else None),
        "manager": (employment.manager if employment else None) or DEFAULT_MANAGER,
        "employmentStatus": _s(employment.employment_status if employment else None),
        "baseSalary": format_money(base if base is not None else DEFAULT_BASE_SALARY, currency),
        "baseSalaryAmount": _s(base if base is not None else DEFAULT_BASE_SALARY),
        "annualSalary": format_money(annual, currency) if annual is not None else "",
        "monthlySalary": format_money(annual / 12, currency) if annual is not None else "",
        "payFrequency": _s(pay_frequency),
        "startDate": format_date(employment.start_date if employment else None),
        "startDateLong": format_long_date(employment.start_date if employment else None),
        "endDate": format_date(employment.end_date if employment else None),
        "endDateLong": format_long_date(employment.end_date if employment else None),
        "location": _s(employment.location if employment else None),
        "weeklyHours": hours_display,
        "workingDaysPerWeek": _s(_setting(settings, "working_days_per_week")),
        "paymentMethod": _s(employment.payment_method if employment else None),
        "taxCode": _s(employment.tax_code if employment else None),
        "benefits": ", ".join(employment.benefits) if employment and employment.benefits else "",
        "status": (employment.status if employment else None) or DEFAULT_STATUS,
    })

    # company
    office = parse_address(company.address if company else None)
    values.update({
        "companyName": _s(company.name if company else None),
        "companyAddress": _s(company.address if company else None),
        "companyAddressLine1": office.line1,
        "companyAddressLine2": office.line2,
        "companyTown": office.town,
        "companyCounty": office.county,
        "companyPostcode": office.postcode,
        "companyCountry": office.country,
        "companyAddressSingleLine": office.single_line(),
        "companyPhone": _s(company.phone if company else None),
        "companyEmail": _s(company.email if company else None),
        "companyWebsite": _s(company.website if company else None),
        "companyIndustry": _s(company.industry if company else None),
        "companySize": _s(company.size if company else None),
        "companyNumber": _s(company.company_number if company else None),
    })

    # terms
    notice_weeks = terms.notice_weeks if terms.notice_weeks is not None else _setting(settings, "default_notice_period_weeks")
    probation_months = _setting(settings, "probation_period_months")
    leave_days = _setting(settings, "leave_entitlement_days")
    contract_date = terms.contract_date or today
    values.update({
        "noticeWeeks": _s(notice_weeks),
        "noticePeriod": pluralize(notice_weeks, "week"),
        "probationPeriod": terms.probation_period or pluralize(probation_months, "month"),
        "probationMonths": _s(probation_months),
        "holidayEntitlement": pluralize(leave_days, "day"),
        "leaveEntitlementDays": _s(leave_days),
        "currency": _s(currency),
        "specialTerms": _s(terms.special_terms),
        "contractDate": format_date(contract_date),
        "contractDateLong": format_long_date(contract_date),
        "currentDate": format_date(today),
        "currentDateLong": format_long_date(today),
        "currentYear": str(today.year),
    })
    return values


class _Blank:
    def __getattr__(self, name):
        return None


# every key the map can hold, independent of any employee
VARIABLE_KEYS = tuple(build_contract_variables(_Blank(), today=date(2000, 1, 1)))

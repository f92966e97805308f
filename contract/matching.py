"""Resolve template placeholder names onto variable keys.

Variable keys are camelCase (``firstName``). A placeholder may spell the key
in any common naming convention, with stray whitespace, or with one of the
usual misspellings seen in uploaded templates.
"""
import difflib
import re
from typing import Iterable, Optional

CLOSE_MATCH_CUTOFF = 0.85

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-.]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_TRAILING_DIGITS = re.compile(r"\d+$")

# synonyms and whole-name misspellings, keyed by normalized form
ALIASES = {
    "name": "fullName",
    "employeename": "fullName",
    "employeefullname": "fullName",
    "employeefirstname": "firstName",
    "employeelastname": "lastName",
    "forename": "firstName",
    "surname": "lastName",
    "employeeemail": "email",
    "employeephone": "phone",
    "employeeaddress": "address",
    "homeaddress": "address",
    "dob": "dateOfBirth",
    "birthdate": "dateOfBirth",
    "ninumber": "nationalInsuranceNumber",
    "nino": "nationalInsuranceNumber",
    "nationalinsurance": "nationalInsuranceNumber",
    "position": "jobTitle",
    "role": "jobTitle",
    "jobrole": "jobTitle",
    "salary": "baseSalary",
    "annualpay": "annualSalary",
    "linemanager": "manager",
    "reportsto": "manager",
    "employmenttype": "employmentStatus",
    "contracttype": "employmentStatus",
    "hoursperweek": "weeklyHours",
    "workinghours": "weeklyHours",
    "hours": "weeklyHours",
    "workplace": "location",
    "placeofwork": "location",
    "commencementdate": "startDate",
    "employer": "companyName",
    "employername": "companyName",
    "company": "companyName",
    "employeraddress": "companyAddress",
    "registeredaddress": "companyAddress",
    "notice": "noticePeriod",
    "probation": "probationPeriod",
    "holiday": "holidayEntitlement",
    "holidays": "holidayEntitlement",
    "annualleave": "holidayEntitlement",
    "today": "currentDate",
    "date": "currentDate",
    "year": "currentYear",
    "zip": "postcode",
    "postalcode": "postcode",
    "city": "town",
}

# misspelled fragments fixed inside a normalized name before lookup
FRAGMENT_FIXES = [
    (re.compile(r"ad+res+(?!s)"), "address"),
    (re.compile(r"postocde|postcdoe|poscode|postcod(?!e)"), "postcode"),
    (re.compile(r"employe(?![er])"), "employee"),
    (re.compile(r"emplyee|employeee"), "employee"),
    (re.compile(r"tittle|titel"), "title"),
    (re.compile(r"salery|sallary|salry"), "salary"),
    (re.compile(r"compnay|comapny"), "company"),
    (re.compile(r"departmnet|deparment"), "department"),
    (re.compile(r"managr|manger"), "manager"),
    (re.compile(r"frist"), "first"),
]


def split_words(key: str) -> list[str]:
    spaced = _CAMEL_BOUNDARY.sub(" ", key.strip())
    return [w.lower() for w in _SEPARATORS.split(spaced) if w]


def naming_variants(key: str) -> dict[str, str]:
    """Every spelling of ``key`` a template author is expected to use."""
    words = split_words(key)
    if not words:
        return {}
    camel = words[0] + "".join(w.capitalize() for w in words[1:])
    return {
        "camel": camel,
        "lower": "".join(words),
        "snake": "_".join(words),
        "upper_snake": "_".join(words).upper(),
        "kebab": "-".join(words),
        "space": " ".join(words),
        "pascal": "".join(w.capitalize() for w in words),
    }


def normalize(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())


def _fix_fragments(norm: str) -> str:
    for pattern, repl in FRAGMENT_FIXES:
        norm = pattern.sub(repl, norm)
    return norm


class VariableResolver:
    def __init__(self, keys: Iterable[str], cutoff: float = CLOSE_MATCH_CUTOFF):
        self.cutoff = cutoff
        self._exact: dict[str, str] = {}
        self._normalized: dict[str, str] = {}
        for key in keys:
            for spelling in naming_variants(key).values():
                self._exact.setdefault(spelling, key)
            self._normalized.setdefault(normalize(key), key)
        self._cache: dict[str, Optional[str]] = {}

    def resolve(self, placeholder: str) -> Optional[str]:
        """Key for a placeholder name, or None when nothing is close enough."""
        name = placeholder.strip()
        if name in self._cache:
            return self._cache[name]
        key = self._lookup(name)
        self._cache[name] = key
        return key

    def _lookup(self, name: str) -> Optional[str]:
        if name in self._exact:
            return self._exact[name]

        norm = normalize(name)
        if not norm:
            return None
        for candidate in (norm, _fix_fragments(norm)):
            if candidate in self._normalized:
                return self._normalized[candidate]
            alias = ALIASES.get(candidate)
            if alias and normalize(alias) in self._normalized:
                return self._normalized[normalize(alias)]

        target = _fix_fragments(norm)
        for close in difflib.get_close_matches(target, list(self._normalized), n=3, cutoff=self.cutoff):
            # addressLine3 is not addressLine1
            if _trailing_digits(close) == _trailing_digits(target):
                return self._normalized[close]
        return None


def _trailing_digits(name: str) -> str:
    found = _TRAILING_DIGITS.search(name)
    return found.group() if found else ""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

CURRENCY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}

Number = Union[Decimal, int, float, str]


def format_date(value: Optional[date]) -> str:
    """UK short form, 01/03/2025."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%d/%m/%Y")


def format_long_date(value: Optional[date]) -> str:
    """1 March 2025"""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day} {value.strftime('%B %Y')}"


def to_decimal(value: Optional[Number]) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value).replace(",", "").replace("£", "").strip())
    except InvalidOperation:
        return None


_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def leading_number(value: Optional[str]) -> Optional[Decimal]:
    """20 for "20 hours per week"; None when the text does not start with a number."""
    if not value:
        return None
    m = _LEADING_NUMBER.match(str(value))
    return Decimal(m.group(1)) if m else None


def format_money(value: Optional[Number], currency: str = "GBP") -> str:
    amount = to_decimal(value)
    if amount is None:
        amount = Decimal("0")
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), "")
    text = f"{amount.quantize(Decimal('0.01')):,.2f}"
    if text.startswith("-"):
        return f"-{symbol}{text[1:]}"
    return f"{symbol}{text}" if symbol else f"{text} {currency.upper()}"


def pluralize(count: Number, unit: str) -> str:
    if isinstance(count, Decimal) and count == count.to_integral_value():
        count = int(count)
    return f"{count} {unit}" if str(count) == "1" else f"{count} {unit}s"


def format_hours(value: Optional[Number]) -> str:
    amount = to_decimal(value)
    if amount is None:
        return ""
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def title_case(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(part[:1].upper() + part[1:].lower() for part in value.split())


def age_on(born: Optional[date], today: date) -> str:
    if born is None:
        return ""
    years = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
    return str(years)

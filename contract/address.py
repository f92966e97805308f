"""Free-text UK address splitting used to fill address placeholders."""
import re
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_COUNTRY = "United Kingdom"

# Royal Mail outward + inward code, with or without the space
POSTCODE_RE = re.compile(r"\b([A-Z]{1,2}[0-9][A-Z0-9]?)\s*([0-9][A-Z]{2})\b", re.IGNORECASE)

COUNTRIES = {
    "united kingdom": "United Kingdom",
    "uk": "United Kingdom",
    "great britain": "United Kingdom",
    "gb": "United Kingdom",
    "england": "England",
    "scotland": "Scotland",
    "wales": "Wales",
    "northern ireland": "Northern Ireland",
    "ireland": "Ireland",
}

COUNTIES = {
    "bedfordshire", "berkshire", "buckinghamshire", "cambridgeshire", "cheshire", "cornwall",
    "cumbria", "derbyshire", "devon", "dorset", "durham", "east sussex", "essex",
    "gloucestershire", "greater london", "greater manchester", "hampshire", "herefordshire",
    "hertfordshire", "kent", "lancashire", "leicestershire", "lincolnshire", "merseyside",
    "norfolk", "north yorkshire", "northamptonshire", "northumberland", "nottinghamshire",
    "oxfordshire", "rutland", "shropshire", "somerset", "south yorkshire", "staffordshire",
    "suffolk", "surrey", "tyne and wear", "warwickshire", "west midlands", "west sussex",
    "west yorkshire", "wiltshire", "worcestershire", "middlesex", "isle of wight",
}


@dataclass
class ParsedAddress:
    lines: list[str] = field(default_factory=list)
    town: str = ""
    county: str = ""
    postcode: str = ""
    country: str = DEFAULT_COUNTRY
    full: str = ""

    @property
    def line1(self) -> str:
        return self.lines[0] if self.lines else ""

    @property
    def line2(self) -> str:
        return ", ".join(self.lines[1:])

    def single_line(self) -> str:
        parts = [*self.lines, self.town, self.county, self.postcode, self.country]
        return ", ".join(p for p in parts if p)

    def multi_line(self) -> str:
        parts = [*self.lines, self.town, self.county, self.postcode, self.country]
        return "\n".join(p for p in parts if p)


def normalize_postcode(raw: str) -> str:
    m = POSTCODE_RE.search(raw)
    if not m:
        return raw.strip().upper()
    return f"{m.group(1).upper()} {m.group(2).upper()}"


def parse_address(raw: Optional[str], default_country: str = DEFAULT_COUNTRY) -> ParsedAddress:
    """Split a comma or newline separated address.

    Trailing parts are peeled off in order: country, postcode, county, town.
    Whatever is left becomes the address lines.
    """
    if not raw or not raw.strip():
        return ParsedAddress(country=default_country)

    parts = [p.strip() for p in re.split(r"[,\n]+", raw) if p.strip()]
    result = ParsedAddress(full=", ".join(parts), country=default_country)

    if parts and parts[-1].lower().rstrip(".") in COUNTRIES:
        result.country = COUNTRIES[parts.pop().lower().rstrip(".")]

    # postcode may share a part with the town ("London SW1A 1AA")
    for i in range(len(parts) - 1, -1, -1):
        m = POSTCODE_RE.search(parts[i])
        if m:
            result.postcode = f"{m.group(1).upper()} {m.group(2).upper()}"
            rest = (parts[i][:m.start()] + parts[i][m.end():]).strip(" ,")
            if rest:
                parts[i] = rest
            else:
                parts.pop(i)
            break

    if len(parts) > 1 and parts[-1].lower() in COUNTIES:
        result.county = parts.pop()

    if len(parts) > 1:
        result.town = parts.pop()

    result.lines = parts
    return result

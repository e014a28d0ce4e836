"""
College ID parsing.

College IDs are fixed-format strings such as "22B81A05C3":

    22   admission year (2022)
    A05  branch code at positions 5-7
    C    section, second-to-last character

Every helper returns "" for an empty or missing ID instead of raising.
"""

from datetime import date
from typing import Optional


BRANCH_CODES = {
    "A05": "CSE",
    "A04": "ECE",
    "A03": "EEE",
    "A01": "CIVIL",
    "A02": "MECH",
}


def derive_branch(college_id: Optional[str]) -> str:
    """Branch name for the ID; unknown codes are returned verbatim."""
    if not college_id:
        return ""
    code = college_id[5:8]
    return BRANCH_CODES.get(code, code)


def derive_year(college_id: Optional[str], today: Optional[date] = None) -> str:
    """
    Current academic year of study, counting the admission year as year 1.

    Args:
        college_id: College ID starting with the two-digit admission year
        today: Reference date (defaults to today)

    Returns:
        Year as a string, e.g. "4" for a 2022 admission evaluated in 2025
    """
    if not college_id:
        return ""
    year_code = college_id[:2]
    if len(year_code) != 2 or not year_code.isdigit():
        return ""

    current_year = (today or date.today()).year
    admission_year = int("20" + year_code)
    return str(current_year - admission_year + 1)


def derive_section(college_id: Optional[str]) -> str:
    """Section letter: the second-to-last character, upper-cased."""
    if not college_id or len(college_id) < 2:
        return ""
    return college_id[-2].upper()

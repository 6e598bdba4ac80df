from __future__ import annotations
import re
from typing import Iterable, List, Pattern, Protocol, Sequence

from csvchat.models.schemas import Table, ValidationReport
from csvchat.models.settings import UploadLimits

# Heuristic tripwires only: these are regexes, not SQL or HTML parsers.
# Swap in stronger detectors through the ``detectors`` argument.
HEADER_PATTERN = re.compile(r"[A-Za-z0-9_\s]+")
SQL_PATTERN = re.compile(
    r"(\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION)\b)|(--|;|/\*|\*/|xp_|sp_)",
    re.IGNORECASE,
)
SCRIPT_PATTERN = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>|javascript:|on\w+\s*=",
    re.IGNORECASE,
)
UNSAFE_CHARS = re.compile(r"[<>'\"`;]")


class Detector(Protocol):
    name: str
    label: str

    def detects(self, cell: str) -> bool: ...


class RegexDetector:
    def __init__(self, name: str, label: str, pattern: Pattern[str]):
        self.name = name
        self.label = label
        self.pattern = pattern

    def detects(self, cell: str) -> bool:
        return self.pattern.search(cell) is not None

    def __repr__(self) -> str:
        return f"RegexDetector({self.name!r})"


SQL_INJECTION = RegexDetector("sql_injection", "SQL injection", SQL_PATTERN)
SCRIPT_INJECTION = RegexDetector("script_injection", "script injection", SCRIPT_PATTERN)
DEFAULT_DETECTORS: Sequence[Detector] = (SQL_INJECTION, SCRIPT_INJECTION)


def header_violations(headers: Sequence[str]) -> List[str]:
    return [
        f'Invalid header at column {i}: "{h}"'
        for i, h in enumerate(headers, start=1)
        if not HEADER_PATTERN.fullmatch(h)
    ]


def injection_violations(rows: Table, detectors: Iterable[Detector] = DEFAULT_DETECTORS) -> List[str]:
    detectors = list(detectors)
    found: List[str] = []
    for r, row in enumerate(rows, start=1):
        for c, cell in enumerate(row, start=1):
            text = str(cell)
            for d in detectors:
                if d.detects(text):
                    found.append(f"Potential {d.label} detected at row {r}, column {c}")
    return found


def validate_table(
    rows: Table,
    limits: UploadLimits | None = None,
    detectors: Iterable[Detector] = DEFAULT_DETECTORS,
) -> ValidationReport:
    """
    Structural and injection checks over a parsed table, header row included.
    Never raises; every violation found is reported, except that an empty
    table short-circuits with a single violation.
    """
    limits = limits or UploadLimits()
    if not rows:
        return ValidationReport(violations=["CSV file is empty"])

    violations: List[str] = []
    if len(rows) > limits.max_rows:
        violations.append(f"CSV exceeds maximum row limit of {limits.max_rows:,}")
    violations.extend(header_violations(rows[0]))
    violations.extend(injection_violations(rows, detectors))
    return ValidationReport(violations=violations)


def sanitize_cell(value: str) -> str:
    return UNSAFE_CHARS.sub("", str(value)).strip()


def sanitize_table(rows: Table) -> Table:
    return [[sanitize_cell(cell) for cell in row] for row in rows]


def build_preview(sanitized: Table, preview_rows: int = 5) -> Table:
    return [list(row) for row in sanitized[:preview_rows]]

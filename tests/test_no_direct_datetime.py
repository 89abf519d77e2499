from __future__ import annotations

import re
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
SCANNED = (ROOT / "portal", ROOT / "scripts")

PATTERNS = (
    r"\bdatetime\.now\(",
    r"\bdatetime\.utcnow\(",
    r"\bdate\.today\(",
    r"\bdatetime\.today\(",
)
COMPILED = [re.compile(pattern) for pattern in PATTERNS]

# Timestamps in portal code come from portal.core.time_provider so tests can
# substitute a clock.
ALLOWED = {"portal/core/time_provider.py"}


def _violations() -> list[tuple[str, int, str]]:
    found: list[tuple[str, int, str]] = []
    for base in SCANNED:
        for file_path in base.rglob("*.py"):
            relative = file_path.relative_to(ROOT).as_posix()
            if relative in ALLOWED:
                continue
            for idx, line in enumerate(file_path.read_text(encoding="utf-8").splitlines(), start=1):
                if any(regex.search(line) for regex in COMPILED):
                    found.append((relative, idx, line.strip()))
    return found


def test_no_direct_datetime_usage_in_portal() -> None:
    violations = _violations()
    assert not violations, "Direct datetime usage found:\n" + "\n".join(
        f"{path}:{line_no}: {line}" for path, line_no, line in violations
    )

"""
Report configuration for the fabric overlap CLI.

Controls malformed-line handling and report formatting, and supports
loading from JSON config files.
"""

import json
import os
from dataclasses import dataclass

from claim_parser import ON_ERROR_CHOICES


@dataclass
class ReportConfig:
    """How claims are read and how the report is rendered."""
    on_error: str = "abort"      # "abort" at first malformed line, or "skip" it
    sort_ids: bool = True
    id_separator: str = ", "
    cross_check: bool = False    # recount with the dense numpy grid

    def __post_init__(self):
        if self.on_error not in ON_ERROR_CHOICES:
            raise ValueError(
                f"on_error must be one of {ON_ERROR_CHOICES}, got '{self.on_error}'"
            )
        for name in ("sort_ids", "cross_check"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")
        if not isinstance(self.id_separator, str):
            raise ValueError(
                f"id_separator must be a string, got {self.id_separator!r}"
            )

    @classmethod
    def from_json(cls, path: str) -> "ReportConfig":
        with open(path) as f:
            data = json.load(f)
        return cls(
            on_error=data.get("on_error", "abort"),
            sort_ids=data.get("sort_ids", True),
            id_separator=data.get("id_separator", ", "),
            cross_check=data.get("cross_check", False),
        )


def default_report_config() -> ReportConfig:
    """Return fabric_report.json next to this module if present, else defaults."""
    default_json = os.path.join(os.path.dirname(__file__), "fabric_report.json")
    if os.path.exists(default_json):
        return ReportConfig.from_json(default_json)
    return ReportConfig()

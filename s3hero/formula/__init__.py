"""Package descriptor (Homebrew formula) tooling."""

from .audit import audit_descriptor, compare_descriptors
from .models import (
    AuditResult,
    Finding,
    HeadRef,
    PackageDescriptor,
    Resource,
    SmokeResult,
    SmokeTest,
)
from .parser import FormulaParseError, load_formula, parse_formula
from .render import render_formula, write_formula

__all__ = [
    "AuditResult",
    "Finding",
    "FormulaParseError",
    "HeadRef",
    "PackageDescriptor",
    "Resource",
    "SmokeResult",
    "SmokeTest",
    "audit_descriptor",
    "compare_descriptors",
    "load_formula",
    "parse_formula",
    "render_formula",
    "write_formula",
]

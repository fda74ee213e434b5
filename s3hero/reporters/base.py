"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3hero.formula.models import AuditResult, Finding


class Reporter(ABC):
    """Abstract base class for audit result reporters."""

    @abstractmethod
    def on_descriptor_start(self, source: str) -> None:
        """Called when auditing of a formula starts."""
        pass

    @abstractmethod
    def on_finding(self, source: str, finding: "Finding") -> None:
        """Called for every finding of a formula."""
        pass

    @abstractmethod
    def on_descriptor_complete(self, result: "AuditResult") -> None:
        """Called when auditing of a formula completes."""
        pass

    @abstractmethod
    def on_run_complete(self, results: dict[str, "AuditResult"]) -> None:
        """Called when all formulae have been audited."""
        pass

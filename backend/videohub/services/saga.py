"""
Saga journal for operations spanning the asset store and the database.

Each lifecycle operation records the steps it completed and the compensating
actions it ran. When an operation fails, the journal is attached to the
DependencyError so the partial state can be inspected and remediated.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from videohub.core.config import settings
from videohub.core.errors import DependencyError
from videohub.services.storage import AssetStoreError

logger = logging.getLogger(__name__)


@dataclass
class SagaEntry:
    step: str
    status: str  # "done", "failed", "compensated" or "unresolved"
    asset_refs: List[str] = field(default_factory=list)
    detail: Optional[str] = None
    attempts: int = 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "status": self.status,
            "asset_refs": list(self.asset_refs),
            "detail": self.detail,
            "attempts": self.attempts,
        }


class SagaLog:
    def __init__(self, operation: str, subject: Optional[str] = None, compensation_attempts: Optional[int] = None):
        self.operation = operation
        self.subject = subject
        self.compensation_attempts = max(2, compensation_attempts or settings.compensation_attempts)
        self.entries: List[SagaEntry] = []

    def _label(self) -> str:
        return f"{self.operation}[{self.subject}]" if self.subject else self.operation

    def done(self, step: str, *asset_refs: str) -> None:
        self.entries.append(SagaEntry(step, "done", list(asset_refs)))
        logger.info(f"Saga {self._label()}: {step} done {list(asset_refs)}")

    def compensate(self, step: str, action: Callable[[str], Any], asset_ref: str) -> bool:
        """
        Run a compensating delete, retrying up to ``compensation_attempts`` times.

        Returns False when every attempt failed; the asset ref is then recorded
        as unresolved and reported with the operation failure.
        """
        last_error = None
        for attempt in range(1, self.compensation_attempts + 1):
            try:
                action(asset_ref)
            except AssetStoreError as e:
                last_error = e
                logger.warning(
                    f"Saga {self._label()}: compensation {step} attempt {attempt} failed for {asset_ref}: {e}"
                )
                continue
            self.entries.append(SagaEntry(step, "compensated", [asset_ref], attempts=attempt))
            logger.info(f"Saga {self._label()}: compensated {step} for {asset_ref}")
            return True
        self.entries.append(
            SagaEntry(step, "unresolved", [asset_ref], detail=str(last_error), attempts=self.compensation_attempts)
        )
        logger.error(
            f"Saga {self._label()}: compensation {step} gave up after "
            f"{self.compensation_attempts} attempts, orphaned asset {asset_ref}"
        )
        return False

    @property
    def unresolved_refs(self) -> List[str]:
        return [ref for entry in self.entries if entry.status == "unresolved" for ref in entry.asset_refs]

    def failure(self, step: str, error: Exception, message: str, *asset_refs: str) -> DependencyError:
        """Record ``step`` as failed and build the error reported to the caller."""
        self.entries.append(SagaEntry(step, "failed", list(asset_refs), detail=str(error)))
        logger.error(f"Saga {self._label()}: {step} failed: {error}")
        if self.unresolved_refs:
            message = f"{message}; cleanup incomplete for {', '.join(self.unresolved_refs)}"
        return DependencyError(
            message,
            errors=[
                {
                    "operation": self.operation,
                    "subject": self.subject,
                    "failed_step": step,
                    "unresolved_asset_refs": self.unresolved_refs,
                    "journal": [entry.as_dict() for entry in self.entries],
                }
            ],
        )

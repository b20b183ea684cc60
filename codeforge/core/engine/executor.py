"""
Action executor — run one turn's actions, strictly in order.

Flow:
    actions → registry dispatch (per action) → feedback records → report

Every action yields exactly one feedback record, whatever happens to
the others. Actions share nothing but the output root on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from codeforge.adapters.registry import AdapterRegistry, default_registry
from codeforge.core.models.action import Action, ActionFeedback

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """Result of executing one batch of actions."""

    feedback: list[ActionFeedback] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.feedback)

    @property
    def succeeded(self) -> int:
        return sum(1 for f in self.feedback if f.ok)

    @property
    def failed(self) -> int:
        return sum(1 for f in self.feedback if f.failed)

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "feedback": [f.model_dump(mode="json") for f in self.feedback],
        }


class ActionExecutor:
    """Executes actions through an adapter registry. Never raises."""

    def __init__(self, registry: AdapterRegistry | None = None):
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def execute(self, action: Action, output_root: str | Path = ".") -> ActionFeedback:
        """Execute one action and return its feedback record."""
        feedback = self._registry.execute_action(action, output_root=str(output_root))

        status_marker = "✓" if feedback.ok else "✗"
        logger.info(
            "%s %s %s → %s",
            status_marker,
            feedback.action_kind,
            feedback.action_detail,
            feedback.status,
        )
        return feedback

    def execute_batch(
        self,
        actions: list[Action],
        output_root: str | Path = ".",
    ) -> ExecutionReport:
        """Execute actions sequentially, one feedback record per action."""
        report = ExecutionReport()
        for action in actions:
            report.feedback.append(self.execute(action, output_root))
        return report

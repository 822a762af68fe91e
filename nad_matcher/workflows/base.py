"""
Abstract base class for the matching workflows.

Every workflow follows the same contract:
  1. Receive a ``MatchingService`` at construction.
  2. ``run(input)`` is the sole public API.
  3. ``run()`` times the execution, calls ``_execute()``, and notifies
     completion listeners with success or the error message.
  4. ``_execute()`` is the workflow-specific implementation; it reports
     progress through ``_step()``.

Listeners are plain callables.  Step listeners receive a ``WorkflowStepEvent``
for every step transition; completion listeners receive exactly one
``WorkflowCompletedEvent`` per run.  Errors are never swallowed: after the
failure is reported the original exception is re-raised.

Usage::

    class MyWorkflow(Workflow[MyInput, MyOutput]):
        workflow_name = "my_workflow"

        def _execute(self, input: MyInput) -> MyOutput:
            self._step("LoadData", WorkflowStepStatus.STARTED, "Loading...")
            ...

    wf = MyWorkflow(service)
    wf.on_step(lambda ev: print(ev.step_name, ev.status))
    output = wf.run(MyInput(...))
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime
from enum import StrEnum
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from nad_matcher.service import MatchingService
from nad_matcher.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class WorkflowStepStatus(StrEnum):
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class WorkflowStepEvent(BaseModel):
    """Progress notification for one workflow step.

    Attributes:
        step_name: Step identifier, e.g. ``"MatchBands"``.
        status:    Step status.
        message:   Human-readable progress message.
        data:      Optional payload (intermediate results).
        timestamp: UTC time the event was raised.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    step_name: str
    status: WorkflowStepStatus
    message: Optional[str] = None
    data: Optional[Any] = None
    timestamp: datetime = Field(default_factory=utcnow)


class WorkflowCompletedEvent(BaseModel):
    """Final notification for a workflow run.

    Attributes:
        workflow_name:    Which workflow finished.
        success:          ``True`` if the run returned normally.
        duration_seconds: Wall-clock duration of the run.
        error_message:    Exception message when ``success`` is ``False``.
        result:           Workflow output when ``success`` is ``True``.
        completed_at:     UTC completion time.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    workflow_name: str
    success: bool
    duration_seconds: float
    error_message: Optional[str] = None
    result: Optional[Any] = None
    completed_at: datetime = Field(default_factory=utcnow)


StepListener = Callable[[WorkflowStepEvent], None]
CompletedListener = Callable[[WorkflowCompletedEvent], None]


class Workflow(ABC, Generic[InputT, OutputT]):
    """Abstract base for matching workflows.

    Subclasses must:
      1. Set ``workflow_name`` class variable.
      2. Implement ``_execute(input) -> output``.

    Attributes:
        workflow_name: Identifier used in logs and completion events.
        service:       Catalog-backed matching service.
    """

    workflow_name: str  # Override in subclass

    def __init__(self, service: MatchingService) -> None:
        self.service = service
        self._step_listeners: list[StepListener] = []
        self._completed_listeners: list[CompletedListener] = []
        self._current_step: Optional[str] = None

    def on_step(self, listener: StepListener) -> None:
        self._step_listeners.append(listener)

    def on_completed(self, listener: CompletedListener) -> None:
        self._completed_listeners.append(listener)

    def run(self, input: InputT) -> OutputT:
        """Execute the workflow.

        Args:
            input: Workflow-specific input model.

        Returns:
            Workflow-specific output model.

        Raises:
            Exception: Re-raises any exception from ``_execute()`` after
                emitting a failed step (if one was running) and a failed
                completion event.
        """
        logger.info("Workflow [%s] starting", self.workflow_name)
        self._current_step = None
        started = time.perf_counter()

        try:
            output = self._execute(input)

        except Exception as exc:
            duration = time.perf_counter() - started
            logger.error(
                "Workflow [%s] FAILED after %.3fs: %s",
                self.workflow_name, duration, exc,
                extra={"workflow": self.workflow_name, "duration_seconds": duration},
            )
            if self._current_step is not None:
                self._step(self._current_step, WorkflowStepStatus.FAILED, str(exc))
            self._complete(
                WorkflowCompletedEvent(
                    workflow_name=self.workflow_name,
                    success=False,
                    duration_seconds=duration,
                    error_message=str(exc),
                )
            )
            raise

        duration = time.perf_counter() - started
        logger.info(
            "Workflow [%s] completed in %.3fs", self.workflow_name, duration,
            extra={"workflow": self.workflow_name, "duration_seconds": duration},
        )
        self._complete(
            WorkflowCompletedEvent(
                workflow_name=self.workflow_name,
                success=True,
                duration_seconds=duration,
                result=output,
            )
        )
        return output

    @abstractmethod
    def _execute(self, input: InputT) -> OutputT:
        """Workflow-specific implementation."""
        ...

    def _step(
        self,
        step_name: str,
        status:    WorkflowStepStatus,
        message:   Optional[str] = None,
        data:      Optional[Any] = None,
    ) -> None:
        """Notify step listeners and track the running step."""
        if status in (WorkflowStepStatus.STARTED, WorkflowStepStatus.IN_PROGRESS):
            self._current_step = step_name
        else:
            self._current_step = None

        logger.debug("Workflow [%s] %s: %s", self.workflow_name, step_name, status.value)
        event = WorkflowStepEvent(
            step_name=step_name, status=status, message=message, data=data
        )
        for listener in self._step_listeners:
            listener(event)

    def _complete(self, event: WorkflowCompletedEvent) -> None:
        for listener in self._completed_listeners:
            listener(event)

"""Teardown handler invoked by the lifecycle controller."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from platform_addons.config import PlatformConfig
from platform_addons.teardown.events import LifecycleEvent, LifecycleResponse, RequestType
from platform_addons.teardown.properties import TeardownProperties
from platform_addons.teardown.steps import CleanupStep, StepContext, default_steps
from platform_addons.utils.errors import CleanupFatalError, CleanupStepError, RegistrationError

logger = logging.getLogger(__name__)


class HandlerState(Enum):
    """Teardown handler states.

    IDLE -> INVOKED -> SUCCEEDED | DEGRADED | FAILED. SUCCEEDED and DEGRADED are
    both acknowledged to the controller as success.
    """

    IDLE = "idle"
    INVOKED = "invoked"
    SUCCEEDED = "succeeded"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass
class StepOutcome:
    """Result of one cleanup step."""

    name: str
    status: str  # "succeeded", "failed" or "skipped"
    message: str = ""


@dataclass
class TeardownOutcome:
    """Terminal state of one handler invocation."""

    state: HandlerState
    response: LifecycleResponse
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def failed_steps(self) -> list[str]:
        return [step.name for step in self.steps if step.status == "failed"]


class TeardownHandler:
    """Runs compensating cleanup when an add-on's registration is deleted.

    Create and Update events are acknowledged without side effects. Delete runs
    the cleanup steps in order; only a failure to reach the cluster is reported as
    a failure, everything else is logged and the event is still acknowledged so
    stack deletion is never blocked by add-on cleanup.

    The handler holds no state between invocations, so redelivered events simply
    run again from the first step.
    """

    def __init__(
        self,
        config: PlatformConfig | None = None,
        steps: list[CleanupStep] | None = None,
        name: str = "teardown",
    ):
        """Initialize handler.

        Args:
            config: Platform configuration (timeouts, kubeconfig, strict mode)
            steps: Cleanup steps to run on Delete (defaults to default_steps())
            name: Name used to prefix log messages
        """
        self.config = config or PlatformConfig()
        self.steps = steps if steps is not None else default_steps()
        self.name = name

    def log_info(self, message: str) -> None:
        logger.info(f"[{self.name}] {message}")

    def log_warn(self, message: str) -> None:
        logger.warning(f"[{self.name}] {message}")

    def log_error(self, message: str) -> None:
        logger.error(f"[{self.name}] {message}")

    def _context(self, properties: TeardownProperties) -> StepContext:
        # Private kubeconfig per cluster so concurrent invocations never share one
        base = self.config.get_kubeconfig_path()
        kubeconfig = base.with_name(f"{base.name}-{properties.cluster_identity.name}")
        return StepContext(
            kubeconfig_path=kubeconfig,
            helm_timeout=self.config.helm_timeout,
            kubectl_timeout=self.config.kubectl_timeout,
        )

    async def handle(self, event: LifecycleEvent) -> TeardownOutcome:
        """Process a lifecycle event.

        Args:
            event: Event delivered by the lifecycle controller

        Returns:
            TeardownOutcome with terminal state and controller response
        """
        self.log_info(f"Received {event.request_type.value} event")

        if event.request_type is not RequestType.DELETE:
            self.log_info(f"Operation {event.request_type.value} - no action required")
            return TeardownOutcome(
                state=HandlerState.SUCCEEDED,
                response=LifecycleResponse.success(
                    event, f"Operation {event.request_type.value} processed"
                ),
            )

        state = HandlerState.INVOKED
        self.log_info(f"State {state.value}")

        try:
            properties = event.properties()
        except RegistrationError as e:
            self.log_error(f"Invalid teardown properties: {e}")
            return TeardownOutcome(
                state=HandlerState.FAILED, response=LifecycleResponse.failed(event, str(e))
            )

        return await self._delete(event, properties)

    async def _delete(
        self, event: LifecycleEvent, properties: TeardownProperties
    ) -> TeardownOutcome:
        context = self._context(properties)
        outcomes: list[StepOutcome] = []

        self.log_info(
            f"Starting cleanup of namespace {properties.namespace} "
            f"on cluster {properties.cluster_identity.name}"
        )

        for step in self.steps:
            if not step.applies_to(properties):
                outcomes.append(StepOutcome(step.name, "skipped"))
                continue

            try:
                message = await step.run(properties, context)
            except CleanupFatalError as e:
                self.log_error(f"Cleanup aborted: {e}")
                outcomes.append(StepOutcome(step.name, "failed", str(e)))
                return TeardownOutcome(
                    state=HandlerState.FAILED,
                    response=LifecycleResponse.failed(event, str(e)),
                    steps=outcomes,
                )
            except CleanupStepError as e:
                self.log_warn(f"Step failed, continuing: {e}")
                outcomes.append(StepOutcome(step.name, "failed", str(e)))
                continue
            except Exception as e:
                error = f"Step '{step.name}' raised {type(e).__name__}: {e}"
                outcomes.append(StepOutcome(step.name, "failed", error))
                if step.fatal:
                    self.log_error(f"Cleanup aborted: {error}")
                    return TeardownOutcome(
                        state=HandlerState.FAILED,
                        response=LifecycleResponse.failed(event, error),
                        steps=outcomes,
                    )
                self.log_warn(f"Step failed, continuing: {error}")
                continue

            self.log_info(message)
            outcomes.append(StepOutcome(step.name, "succeeded", message))

        attempted = [o for o in outcomes if o.status != "skipped" and not self._is_fatal(o.name)]
        failed = [o.name for o in attempted if o.status == "failed"]

        if self.config.strict_teardown and attempted and len(failed) == len(attempted):
            message = f"All cleanup steps failed: {', '.join(failed)}"
            self.log_error(message)
            return TeardownOutcome(
                state=HandlerState.FAILED,
                response=LifecycleResponse.failed(event, message),
                steps=outcomes,
            )

        if failed:
            message = (
                f"Cleanup of namespace {properties.namespace} completed with "
                f"{len(failed)} failed step(s): {', '.join(failed)}"
            )
            self.log_warn(message)
            state = HandlerState.DEGRADED
        else:
            message = f"Cleanup of namespace {properties.namespace} completed"
            self.log_info(message)
            state = HandlerState.SUCCEEDED

        return TeardownOutcome(
            state=state, response=LifecycleResponse.success(event, message), steps=outcomes
        )

    def _is_fatal(self, step_name: str) -> bool:
        return any(step.fatal for step in self.steps if step.name == step_name)

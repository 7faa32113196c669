"""Function entrypoint for the lifecycle controller.

Deployed as the teardown function's handler (`platform_addons.teardown.entrypoint.handler`).
The return value is the custom resource response body.
"""

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from platform_addons.config import PlatformConfig
from platform_addons.teardown.events import LifecycleEvent, LifecycleResponse, ResponseStatus
from platform_addons.teardown.handler import TeardownHandler
from platform_addons.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _invalid_event_response(raw_event: dict[str, Any], error: str) -> dict[str, Any]:
    response = LifecycleResponse(
        status=ResponseStatus.FAILED,
        reason=error,
        physical_resource_id=raw_event.get("PhysicalResourceId") or "invalid-event",
        stack_id=raw_event.get("StackId"),
        request_id=raw_event.get("RequestId"),
        logical_resource_id=raw_event.get("LogicalResourceId"),
        data={"Error": error},
    )
    return response.to_wire()


async def invoke(
    teardown: TeardownHandler, raw_event: dict[str, Any], timeout: float
) -> dict[str, Any]:
    """Parse a raw event, run the handler under a deadline and build the response.

    Args:
        teardown: Handler to invoke
        raw_event: Event as delivered by the controller
        timeout: Overall deadline in seconds

    Returns:
        Response body for the controller
    """
    try:
        event = LifecycleEvent.model_validate(raw_event)
    except ValidationError as e:
        logger.error(f"Invalid lifecycle event: {e}")
        return _invalid_event_response(raw_event, f"Invalid lifecycle event: {e}")

    try:
        outcome = await asyncio.wait_for(teardown.handle(event), timeout=timeout)
    except asyncio.TimeoutError:
        message = f"Teardown did not finish within {timeout}s"
        logger.error(message)
        return LifecycleResponse.failed(event, message).to_wire()
    except Exception as e:
        message = f"Teardown raised {type(e).__name__}: {e}"
        logger.exception(message)
        return LifecycleResponse.failed(event, message).to_wire()

    logger.info(f"Teardown finished in state {outcome.state.value}")
    return outcome.response.to_wire()


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Entry point called by the function runtime.

    Args:
        event: Custom resource request
        context: Runtime context (unused)

    Returns:
        Custom resource response body
    """
    config = PlatformConfig()
    setup_logging(config.log_level, json_output=True)
    logger.info(
        f"Received event: {event.get('RequestType')} for {event.get('LogicalResourceId')}"
    )

    teardown = TeardownHandler(config)
    # Leave headroom under the controller's own ceiling to report the timeout
    deadline = max(config.teardown_timeout - 30, 1)
    return asyncio.run(invoke(teardown, event, deadline))

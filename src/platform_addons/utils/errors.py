"""Custom exception classes for platform add-ons."""


class PlatformError(Exception):
    """Base exception for platform add-on errors."""

    pass


class ConfigurationError(PlatformError):
    """Raised when configuration is invalid or missing."""

    pass


class GraphError(PlatformError):
    """Base class for resource graph validation errors."""

    pass


class CycleError(GraphError):
    """Raised when resource dependencies form a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Dependency cycle detected: {' -> '.join(cycle)}")


class UnknownDependencyError(GraphError):
    """Raised when a node depends on an id that is not part of the graph."""

    def __init__(self, node_id: str, missing_id: str):
        self.node_id = node_id
        self.missing_id = missing_id
        super().__init__(f"Node '{node_id}' depends on unknown node '{missing_id}'")


class DuplicateNodeError(GraphError):
    """Raised when two nodes in the same graph share an id."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Duplicate node id: '{node_id}'")


class DeploymentError(PlatformError):
    """Raised when a resource cannot be created.

    Resources created before the failing node are left in place.
    """

    def __init__(self, failed_node_id: str, cause: BaseException | str):
        self.failed_node_id = failed_node_id
        self.cause = cause
        super().__init__(f"Failed to create '{failed_node_id}': {cause}")


class RegistrationError(PlatformError):
    """Raised when a teardown registration is invalid."""

    pass


class CleanupError(PlatformError):
    """Base class for teardown step errors."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(f"[{step}] {message}")


class CleanupStepError(CleanupError):
    """Raised by a best-effort cleanup step. Logged and absorbed by the handler."""

    pass


class CleanupFatalError(CleanupError):
    """Raised when the cluster API cannot be reached during teardown."""

    pass


class CommandError(PlatformError):
    """Raised when an external CLI command fails."""

    pass


class HelmCommandError(CommandError):
    """Raised when a helm CLI command fails."""

    pass


class KubectlCommandError(CommandError):
    """Raised when a kubectl CLI command fails."""

    pass

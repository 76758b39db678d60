"""Errors raised while deploying contracts."""


class DeploymentFailure(Exception):
    """Base exception for deployment-related errors."""


class ArtifactResolutionError(DeploymentFailure, ValueError):
    """Raised when a contract artifact cannot be resolved by name."""


class InvalidArguments(DeploymentFailure, ValueError):
    """Raised when call arguments do not match the contract ABI."""


class TransactionFailure(DeploymentFailure):
    """Raised when a transaction reverts or is rejected by the network."""


class ConfirmationTimeout(DeploymentFailure, TimeoutError):
    """Raised when a transaction does not reach the required confirmations in time."""


class InitializerFailure(DeploymentFailure):
    """
    Raised when the initializer call of an upgradeable deployment fails.

    The proxy and its implementation remain deployed, but uninitialized.
    """

    def __init__(self, message: str, proxy_address: str, implementation_address: str):
        super().__init__(message)
        self.proxy_address = proxy_address
        self.implementation_address = implementation_address


class ManifestError(DeploymentFailure, ValueError):
    """Raised when a deployment manifest is malformed."""


class DeploymentAborted(DeploymentFailure):
    """Raised when the operator declines to continue."""

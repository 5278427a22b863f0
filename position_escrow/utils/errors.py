# position_escrow/utils/errors.py


class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided config (addresses, fee values, etc).
    Should NOT print traceback.
    """


class Revert(RuntimeError):
    """
    A call aborted on the host. Every state change made since the
    enclosing call frame started is rolled back before it propagates.
    """


# ----------------------------------------------------------------------
# Authorization
# ----------------------------------------------------------------------
class AuthorizationError(Revert):
    pass


class Unauthorized(AuthorizationError):
    """Caller is not the resolved controller / owner."""


# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------
class ConfigurationError(Revert):
    pass


class ConfigurationMissing(ConfigurationError):
    """A required collaborator address is still the zero address."""


# ----------------------------------------------------------------------
# Precondition
# ----------------------------------------------------------------------
class PreconditionError(Revert):
    pass


class NoTransferSignaled(PreconditionError):
    """The reward router holds no pending transfer to the predicted escrow."""


class FeeOutOfBounds(PreconditionError):
    pass


class NotAContract(PreconditionError):
    pass


# ----------------------------------------------------------------------
# Deployment
# ----------------------------------------------------------------------
class DeploymentError(Revert):
    pass


class DeploymentFailed(DeploymentError):
    """The relay could not be created (salt already consumed)."""


class InitializationFailed(DeploymentError):
    """The relay call reverted or left no code at the target address."""


# ----------------------------------------------------------------------
# External call failures
# ----------------------------------------------------------------------
class ExternalCallFailure(Revert):
    pass


class NativeTransferFailed(ExternalCallFailure):
    pass


class TransferFailed(ExternalCallFailure):
    pass


class TransferFromFailed(ExternalCallFailure):
    pass


class ApproveFailed(ExternalCallFailure):
    pass


# ----------------------------------------------------------------------
# Host
# ----------------------------------------------------------------------
class InsufficientBalance(Revert):
    pass


class UnknownMethod(Revert):
    pass


class ValueRejected(Revert):
    """Native value sent to a contract that has no receive hook."""

"""
Hyperion Exceptions

Custom exception classes for the Hyperion bridge.

Every precondition failure inside a contract raises a ``Revert`` subclass.
The simulated chain rolls back all state touched by the failing transaction
before the exception reaches the caller.
"""


class HyperionException(Exception):
    """Base exception for Hyperion."""
    pass


# ══════════════════════════════════════════════════════════════════════
#  CONTRACT REVERTS
# ══════════════════════════════════════════════════════════════════════

class Revert(HyperionException):
    """A contract call aborted with a textual reason."""

    def __init__(self, reason: str = ""):
        super().__init__(reason)
        self.reason = reason


class AuthorizationError(Revert):
    """Caller is not the owner, or ownership is required but renounced/expired."""
    pass


class LifecycleError(Revert):
    """Contract paused, already initialized, or ownership not yet expired."""
    pass


class ReplayError(Revert):
    """Nonce not strictly greater, nonce jump too large, or batch timed out."""
    pass


class ConsistencyError(Revert):
    """Presented validator set does not match the checkpoint, or malformed arrays."""
    pass


class QuorumError(Revert):
    """Signature set does not authorize the action."""
    pass


class InvalidSignatureError(QuorumError):
    """A signature did not recover to the declared validator."""
    pass


class InsufficientPowerError(QuorumError):
    """Cumulative power is below the power threshold."""
    pass


class InvalidValueError(Revert):
    """Zero-address target or an out-of-range value."""
    pass


class TokenError(InvalidValueError):
    """Insufficient balance/allowance, or an ERC-20 call that failed."""
    pass


class ReentrancyError(Revert):
    """Guarded function entered while already executing."""
    pass


# ══════════════════════════════════════════════════════════════════════
#  OFF-CHAIN ERRORS
# ══════════════════════════════════════════════════════════════════════

class InvalidKeyError(HyperionException):
    """Invalid cryptographic key."""
    pass


class InvalidAddressError(HyperionException):
    """Invalid address format."""
    pass


class RelayerError(HyperionException):
    """Relayer could not assemble a submittable call."""
    pass


class ConfigurationError(HyperionException):
    """Configuration error."""
    pass

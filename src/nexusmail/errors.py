"""
NexusMail Errors

Error taxonomy raised by the services. Every error is raised before any
mutation happens, so a failed call leaves the stores unchanged.
"""


class NexusMailError(Exception):
    """Base class for engine errors"""


class ValidationError(NexusMailError, ValueError):
    """Malformed input (empty subject, unknown recipient, ...)"""


class NotFound(NexusMailError, LookupError):
    """Operation targets an id that does not exist (or is not visible to the actor)"""


class PermissionDenied(NexusMailError):
    """Actor's role does not allow the operation"""


class ChatError(NexusMailError):
    """Support-chat precondition failure"""


class InvalidSession(ChatError):
    """Chat session does not exist"""


class SessionClosed(ChatError):
    """Member tried to write into a closed session"""


class InvalidTransition(ChatError):
    """Session status change not allowed from the current status"""

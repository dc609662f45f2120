"""
Error taxonomy shared by the server and the client package
"""


class QuizAppError(Exception):
    """Base class for all application errors"""


class NotFoundError(QuizAppError):
    """Requested quiz or result does not exist"""


class QuizValidationError(QuizAppError):
    """Malformed answer index, out-of-range position or bad authoring data"""


class TransportError(QuizAppError):
    """Store or notification channel unreachable"""


class DecodeError(QuizAppError):
    """Notification payload could not be decoded"""

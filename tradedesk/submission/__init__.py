from .payload import SubmissionPayload, normalize, strip_empty
from .notifier import Notifier, LoggingNotifier, RecordingNotifier, Notice

__all__ = [
    'SubmissionPayload',
    'normalize',
    'strip_empty',
    'Notifier',
    'LoggingNotifier',
    'RecordingNotifier',
    'Notice'
]

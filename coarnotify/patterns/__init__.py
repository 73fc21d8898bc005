# coarnotify/patterns/__init__.py
"""
The COAR Notify patterns.

Importing this package registers every pattern with coarnotify.factory.
"""

from .accept import Accept
from .announce_endorsement import AnnounceEndorsement, AnnounceEndorsementContext, AnnounceEndorsementItem
from .announce_relationship import AnnounceRelationship, AnnounceRelationshipObject
from .announce_review import AnnounceReview, AnnounceReviewContext, AnnounceReviewItem, AnnounceReviewObject
from .announce_service_result import (
    AnnounceServiceResult,
    AnnounceServiceResultContext,
    AnnounceServiceResultItem,
    AnnounceServiceResultObject,
)
from .reject import Reject
from .request_endorsement import RequestEndorsement, RequestEndorsementItem, RequestEndorsementObject
from .request_review import RequestReview, RequestReviewItem, RequestReviewObject
from .tentatively_accept import TentativelyAccept
from .tentatively_reject import TentativelyReject
from .undo_offer import UndoOffer
from .unprocessable_notification import UnprocessableNotification

__all__ = [
    "Accept",
    "AnnounceEndorsement",
    "AnnounceEndorsementContext",
    "AnnounceEndorsementItem",
    "AnnounceRelationship",
    "AnnounceRelationshipObject",
    "AnnounceReview",
    "AnnounceReviewContext",
    "AnnounceReviewItem",
    "AnnounceReviewObject",
    "AnnounceServiceResult",
    "AnnounceServiceResultContext",
    "AnnounceServiceResultItem",
    "AnnounceServiceResultObject",
    "Reject",
    "RequestEndorsement",
    "RequestEndorsementItem",
    "RequestEndorsementObject",
    "RequestReview",
    "RequestReviewItem",
    "RequestReviewObject",
    "TentativelyAccept",
    "TentativelyReject",
    "UndoOffer",
    "UnprocessableNotification",
]

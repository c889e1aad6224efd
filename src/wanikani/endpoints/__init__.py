"""Per-resource endpoint wrappers.

Each class maps a handful of REST paths onto the client's ``request``
operation with the right TTL.  :class:`~wanikani.api.WaniKaniAPI` builds
one instance of each.
"""

from wanikani.endpoints.base import CollectionEndpoint, Endpoint
from wanikani.endpoints.resources import (
    AssignmentsEndpoint,
    LevelProgressionsEndpoint,
    ResetsEndpoint,
    ReviewsEndpoint,
    ReviewStatisticsEndpoint,
    SpacedRepetitionSystemsEndpoint,
    StudyMaterialsEndpoint,
    SubjectsEndpoint,
    SummaryEndpoint,
    UserEndpoint,
    VoiceActorsEndpoint,
)

__all__ = [
    "AssignmentsEndpoint",
    "CollectionEndpoint",
    "Endpoint",
    "LevelProgressionsEndpoint",
    "ResetsEndpoint",
    "ReviewStatisticsEndpoint",
    "ReviewsEndpoint",
    "SpacedRepetitionSystemsEndpoint",
    "StudyMaterialsEndpoint",
    "SubjectsEndpoint",
    "SummaryEndpoint",
    "UserEndpoint",
    "VoiceActorsEndpoint",
]

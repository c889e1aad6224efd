"""Endpoint wrappers for each WaniKani API resource.

See https://docs.api.wanikani.com/20170710/ for the shape of each payload.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from wanikani.client.base import format_timestamp
from wanikani.endpoints.base import CollectionEndpoint, Endpoint


class UserEndpoint(Endpoint):
    """The authenticated user's profile, subscription and preferences."""

    category = "user"

    def get(self) -> Any:
        return self._get("user")

    def update(self, preferences: dict[str, Any]) -> Any:
        """Update the user's preferences (``PUT /user``)."""
        return self._send("PUT", "user", {"user": {"preferences": preferences}})


class SummaryEndpoint(Endpoint):
    """Lessons and reviews available now and over the next 24 hours.

    The report rolls over every hour, so it is only cached briefly.
    """

    category = "summary"

    def get(self) -> Any:
        return self._get("summary")


class SubjectsEndpoint(CollectionEndpoint):
    """Radicals, kanji and vocabulary."""

    category = "subjects"
    path = "subjects"


class AssignmentsEndpoint(CollectionEndpoint):
    category = "assignments"
    path = "assignments"

    def start(self, id: int, started_at: Optional[datetime] = None) -> Any:
        """Mark an assignment as started (``PUT /assignments/<id>/start``).

        Args:
            id: The assignment ID.
            started_at: When the lesson was completed; defaults to now.
        """
        started_at = started_at or datetime.now(timezone.utc)
        return self._send("PUT", f"{self.path}/{id}/start", {"started_at": format_timestamp(started_at)})


class ReviewsEndpoint(CollectionEndpoint):
    """Completed reviews.  Reviews never change once recorded."""

    category = "reviews"
    path = "reviews"

    def create(
        self,
        subject_id: int,
        incorrect_meaning_answers: int,
        incorrect_reading_answers: int,
    ) -> Any:
        """Record a review (``POST /reviews``)."""
        return self._send(
            "POST",
            self.path,
            {
                "subject_id": subject_id,
                "incorrect_meaning_answers": incorrect_meaning_answers,
                "incorrect_reading_answers": incorrect_reading_answers,
            },
        )


class ReviewStatisticsEndpoint(CollectionEndpoint):
    category = "review_statistics"
    path = "review_statistics"


class StudyMaterialsEndpoint(CollectionEndpoint):
    """User notes and synonyms attached to subjects."""

    category = "study_materials"
    path = "study_materials"

    def create(self, data: dict[str, Any]) -> Any:
        return self._send("POST", self.path, data)

    def update(self, id: int, data: dict[str, Any]) -> Any:
        return self._send("PUT", f"{self.path}/{id}", data)


class ResetsEndpoint(CollectionEndpoint):
    category = "resets"
    path = "resets"


class LevelProgressionsEndpoint(CollectionEndpoint):
    category = "level_progressions"
    path = "level_progressions"


class SpacedRepetitionSystemsEndpoint(CollectionEndpoint):
    category = "srs"
    path = "spaced_repetition_systems"


class VoiceActorsEndpoint(CollectionEndpoint):
    category = "voice_actors"
    path = "voice_actors"

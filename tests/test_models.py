"""Tests for the podcast and episode document models."""

from __future__ import annotations

from bson.objectid import ObjectId

from quickstart.models import Episode, Podcast, PodcastEpisode


class TestToDocument:
    def test_unset_fields_are_omitted(self):
        podcast = Podcast(title="Transactions for All", author="Nic Raboy")

        assert podcast.to_document() == {"title": "Transactions for All", "author": "Nic Raboy"}

    def test_id_is_written_as_underscore_id(self):
        oid = ObjectId()
        podcast = Podcast(id=oid, title="Show")

        assert podcast.to_document() == {"_id": oid, "title": "Show"}

    def test_episode_keeps_object_id_reference(self):
        podcast_id = ObjectId()
        episode = Episode(podcast=podcast_id, title="Pilot", duration=30)

        doc = episode.to_document()

        assert doc["podcast"] is podcast_id
        assert doc["duration"] == 30
        assert "description" not in doc


class TestFromDocument:
    def test_reads_underscore_id(self):
        oid = ObjectId()

        podcast = Podcast.model_validate({"_id": oid, "title": "Show", "tags": ["a", "b"]})

        assert podcast.id == oid
        assert podcast.tags == ["a", "b"]

    def test_joined_episode(self):
        podcast_id = ObjectId()
        episode_id = ObjectId()
        row = {
            "_id": episode_id,
            "podcast": {"_id": podcast_id, "title": "The Polyglot Developer Podcast", "author": "Nic Raboy"},
            "title": "GraphQL for API Development",
            "duration": 25,
        }

        joined = PodcastEpisode.model_validate(row)

        assert joined.id == episode_id
        assert isinstance(joined.podcast, Podcast)
        assert joined.podcast.id == podcast_id
        assert joined.podcast.author == "Nic Raboy"
        assert joined.publish_date is None

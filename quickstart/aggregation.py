"""Aggregation samples: per-podcast totals and an episode/podcast join."""
from __future__ import annotations

import argparse

from bson.objectid import ObjectId

from .connect_db import get_client, get_database
from .models import PodcastEpisode

DEFAULT_PODCAST_ID = "5e3b37e51c9d4400004117e6"

EPISODES_WITH_PODCAST = [
    {"$lookup": {"from": "podcasts", "localField": "podcast", "foreignField": "_id", "as": "podcast"}},
    {"$unwind": {"path": "$podcast", "preserveNullAndEmptyArrays": False}},
]


def total_duration(db, podcast_id) -> list[dict]:
    pipeline = [
        {"$match": {"podcast": ObjectId(podcast_id)}},
        {"$group": {"_id": "$podcast", "total": {"$sum": "$duration"}}},
    ]
    return list(db.episodes.aggregate(pipeline))


def episodes_with_podcast(db) -> list[dict]:
    return list(db.episodes.aggregate(EPISODES_WITH_PODCAST))


def episodes_with_podcast_models(db) -> list[PodcastEpisode]:
    return [PodcastEpisode.model_validate(doc) for doc in db.episodes.aggregate(EPISODES_WITH_PODCAST)]


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Run the episode aggregation samples")
    parser.add_argument(
        "--podcast-id",
        default=DEFAULT_PODCAST_ID,
        help="Hex ObjectId of the podcast whose episode durations are summed",
    )
    args = parser.parse_args(argv)

    with get_client() as client:
        db = get_database(client)
        print(total_duration(db, args.podcast_id))
        print(episodes_with_podcast(db))
        print(episodes_with_podcast_models(db))


if __name__ == "__main__":
    main()

"""Update samples against the ``podcasts`` collection.

Usage:
    python -m quickstart.updating --podcast-id 5dd890a61c9d4400003f3a31
"""
from __future__ import annotations

import argparse

from bson.objectid import ObjectId

from .connect_db import get_client, get_database

DEFAULT_PODCAST_ID = "5dd890a61c9d4400003f3a31"
POLYGLOT_TITLE = "The Polyglot Developer Podcast"


def set_author_by_id(db, podcast_id, author: str) -> int:
    """Update a single document based on its id; returns the matched count."""
    result = db.podcasts.update_one(
        {"_id": ObjectId(podcast_id)},
        {"$set": {"author": author}},
    )
    return result.matched_count


def set_author_by_title(db, title: str, author: str) -> int:
    result = db.podcasts.update_many(
        {"title": title},
        {"$set": {"author": author}},
    )
    return result.modified_count


def set_author_and_website(db, title: str, author: str, website: str) -> int:
    """Like set_author_by_title, also adding a field the documents may not have."""
    result = db.podcasts.update_many(
        {"title": title},
        {"$set": {"author": author, "website": website}},
    )
    return result.modified_count


def replace_podcast(db, author: str, replacement: dict) -> int:
    result = db.podcasts.replace_one({"author": author}, replacement)
    return result.modified_count


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Run the podcast update samples")
    parser.add_argument(
        "--podcast-id",
        default=DEFAULT_PODCAST_ID,
        help="Hex ObjectId of the podcast updated by id",
    )
    args = parser.parse_args(argv)

    with get_client() as client:
        db = get_database(client)

        matched = set_author_by_id(db, args.podcast_id, "Nic Raboy")
        print(f"Updated {matched} Documents!")

        modified = set_author_by_title(db, POLYGLOT_TITLE, "Nicolas Raboy")
        print(f"Updated {modified} Documents!")

        modified = set_author_and_website(db, POLYGLOT_TITLE, "Nic Raboy", "thepolyglotdeveloper.com")
        print(f"Updated {modified} Documents!")

        replaced = replace_podcast(
            db,
            "Nic Raboy",
            {"title": "The Nic Raboy Show", "author": "Nicolas Raboy"},
        )
        print(f"Replaced {replaced} Documents!")


if __name__ == "__main__":
    main()

"""Transaction samples.

``run_in_transaction`` drives a session by hand: start, run the body, then
commit, or abort when the body raises. ``run_with_retry`` hands the same body
to ``ClientSession.with_transaction`` so the driver retries transient errors.
"""
from typing import Any, Callable

from pymongo.client_session import ClientSession
from pymongo.errors import PyMongoError

from .connect_db import get_client, get_database
from .models import Episode, Podcast

Body = Callable[[ClientSession], Any]


def run_in_transaction(client, body: Body) -> Any:
    with client.start_session() as session:
        session.start_transaction()
        try:
            result = body(session)
        except Exception:
            session.abort_transaction()
            raise
        session.commit_transaction()
        return result


def run_with_retry(client, body: Body) -> Any:
    with client.start_session() as session:
        return session.with_transaction(body)


def insert_podcast_in_transaction(client, db):
    def body(session):
        podcast = Podcast(title="Transactions for All", author="Nic Raboy")
        return db.podcasts.insert_one(podcast.to_document(), session=session).inserted_id

    return run_in_transaction(client, body)


ROLLED_BACK_TITLE = "Rolled Back Podcast"


def insert_invalid_episode_in_transaction(client, db):
    """Insert a podcast, then an episode the duration validator rejects.

    The second write fails, so the podcast insert is rolled back with it.
    """
    def body(session):
        podcast = Podcast(title=ROLLED_BACK_TITLE, author="Nic Raboy")
        podcast_id = db.podcasts.insert_one(podcast.to_document(), session=session).inserted_id
        episode = Episode(podcast=podcast_id, title="Too Short", duration=1)
        db.episodes.insert_one(episode.to_document(), session=session)
        return podcast_id

    return run_with_retry(client, body)


def main():
    with get_client() as client:
        db = get_database(client)

        print(insert_podcast_in_transaction(client, db))

        try:
            insert_invalid_episode_in_transaction(client, db)
        except PyMongoError as e:
            print(f"Transaction aborted: {e}")
        visible = db.podcasts.count_documents({"title": ROLLED_BACK_TITLE})
        print(f"{visible} rolled back podcast(s) visible after abort")


if __name__ == "__main__":
    main()

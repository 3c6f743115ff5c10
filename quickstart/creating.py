from .connect_db import get_client, get_database
from .models import Episode, Podcast


def insert_podcast(db):
    podcast = Podcast(
        title="The Polyglot Developer Podcast",
        author="Nic Raboy",
        tags=["development", "programming", "coding"],
    )
    result = db.podcasts.insert_one(podcast.to_document())
    return result.inserted_id


def insert_episodes(db, podcast_id):
    episodes = [
        Episode(
            podcast=podcast_id,
            title="GraphQL for API Development",
            description="Learn about GraphQL from the co-creator of GraphQL, Lee Byron.",
            duration=25,
        ),
        Episode(
            podcast=podcast_id,
            title="Progressive Web Application Development",
            description="Learn about PWA development with Tara Manicsic.",
            duration=32,
        ),
    ]
    result = db.episodes.insert_many([e.to_document() for e in episodes])
    return result.inserted_ids


def main():
    with get_client() as client:
        db = get_database(client)
        podcast_id = insert_podcast(db)
        episode_ids = insert_episodes(db, podcast_id)
        print(f"Inserted {len(episode_ids)} documents into episode collection!")


if __name__ == "__main__":
    main()

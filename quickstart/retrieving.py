from bson.objectid import ObjectId
from pymongo import DESCENDING

from .connect_db import get_client, get_database


def find_first_podcast(db):
    return db.podcasts.find_one({})


def find_podcast_by_id(db, podcast_id):
    if isinstance(podcast_id, str):
        podcast_id = ObjectId(podcast_id)
    return db.podcasts.find_one({"_id": podcast_id})


def find_episodes_by_duration(db, duration=25):
    return list(db.episodes.find({"duration": duration}))


def find_longer_episodes(db, min_duration=24):
    cursor = db.episodes.find({"duration": {"$gt": min_duration}}).sort("duration", DESCENDING)
    return list(cursor)


def main():
    with get_client() as client:
        db = get_database(client)
        print(find_first_podcast(db))
        for episode in find_episodes_by_duration(db):
            print(episode)
        for episode in find_longer_episodes(db):
            print(episode)


if __name__ == "__main__":
    main()

from .connect_db import get_client, get_database


def delete_podcast(db, title):
    return db.podcasts.delete_one({"title": title}).deleted_count


def delete_episodes_by_duration(db, duration=25):
    return db.episodes.delete_many({"duration": duration}).deleted_count


def drop_collections(db):
    # drop() on a missing collection is a no-op on the server
    db.podcasts.drop()
    db.episodes.drop()


def main():
    with get_client() as client:
        db = get_database(client)

        deleted = delete_podcast(db, "The Polyglot Developer Podcast")
        print(f"DeleteOne removed {deleted} document(s)")

        deleted = delete_episodes_by_duration(db)
        print(f"DeleteMany removed {deleted} document(s)")

        drop_collections(db)


if __name__ == "__main__":
    main()

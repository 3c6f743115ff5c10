# connect_db.py - shared Atlas connection for the quickstart samples
import os
from typing import Optional

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.database import Database

load_dotenv()
ATLAS_URI = os.getenv("ATLAS_URI") or os.getenv("MONGO_URI")
DB_NAME = os.getenv("DB_NAME", "quickstart")

# Samples give the cluster ten seconds to answer before giving up.
CONNECT_TIMEOUT_MS = 10_000


def get_client(uri: Optional[str] = None) -> MongoClient:
    uri = uri or ATLAS_URI
    if not uri:
        raise RuntimeError("ATLAS_URI is not set. Add it to your environment or .env file.")
    try:
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=CONNECT_TIMEOUT_MS,
            connectTimeoutMS=CONNECT_TIMEOUT_MS,
        )

        # Test the connection
        client.admin.command("ping")
        return client
    except Exception as e:
        print(f"❌ Failed to connect to MongoDB: {e}")
        raise


def get_database(client: Optional[MongoClient] = None, name: Optional[str] = None) -> Database:
    if client is None:
        client = get_client()
    name = name or DB_NAME
    db = client[name]
    print(f"✅ Connected to MongoDB database: {name}")
    return db


def main():
    with get_client() as client:
        print(client.list_database_names())


if __name__ == "__main__":
    main()

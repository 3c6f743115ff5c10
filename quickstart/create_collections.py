from pymongo.errors import CollectionInvalid, OperationFailure

from .connect_db import get_client, get_database
from .schema import COLLECTION_SCHEMAS


def create_collections(db=None):
    if db is None:
        db = get_database()

    for name, schema in COLLECTION_SCHEMAS.items():
        try:
            db.create_collection(name)
        except CollectionInvalid:
            # already exists; the validator is refreshed below
            pass

        try:
            db.command("collMod", name, validator={"$jsonSchema": schema})
            print(f"✅ Created/updated collection '{name}' with validation.")
        except OperationFailure as e:
            print(f"⚠️ Failed to apply validator to '{name}': {e}")
            raise


def main():
    with get_client() as client:
        create_collections(get_database(client))


if __name__ == "__main__":
    main()

from functools import lru_cache
from typing import Optional

import jsonschema
from bson.errors import InvalidId
from bson.objectid import ObjectId
from fastapi import Depends, FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field

from quickstart.aggregation import episodes_with_podcast_models, total_duration
from quickstart.connect_db import DB_NAME, get_client
from quickstart.schema import validate_document

app = FastAPI(title="Podcast Quickstart API (Mongo)", version="1.0.0")


@lru_cache(maxsize=1)
def _shared_client():
    return get_client()


def db_conn():
    # one client per process; MongoClient pools connections itself
    yield _shared_client()[DB_NAME]


# ======== Schemas ========
class PodcastIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    tags: Optional[list[str]] = None
    website: Optional[str] = Field(default=None, max_length=255)


class PodcastOut(BaseModel):
    id: str
    title: Optional[str] = None
    author: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    website: Optional[str] = None


class PodcastPatch(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    tags: Optional[list[str]] = None
    website: Optional[str] = Field(default=None, max_length=255)


class EpisodeIn(BaseModel):
    podcast: Optional[str] = Field(default=None, description="Hex id of the owning podcast")
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    # bounds come from the collection validator, checked in _validate
    duration: Optional[int] = Field(default=None, description="Length in minutes")


class EpisodeOut(BaseModel):
    id: str
    podcast: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None


class EpisodePatch(BaseModel):
    podcast: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration: Optional[int] = None


class PodcastEpisodeOut(BaseModel):
    id: str
    podcast: PodcastOut
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None


class TotalDurationOut(BaseModel):
    podcast_id: str
    total: int


# ======== Utility helpers ========
def _parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail="Invalid id")


def _validate(collection: str, doc: dict) -> None:
    try:
        validate_document(collection, doc)
    except jsonschema.ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Schema validation error: {e.message}")


def _without_none(doc: dict) -> dict:
    return {k: v for k, v in doc.items() if v is not None}


def _patch_fields(payload: BaseModel) -> dict:
    """Fields the client set, refusing explicit nulls so $set never stores one."""
    payload_dict = payload.model_dump(exclude_unset=True)
    if not payload_dict:
        raise HTTPException(status_code=400, detail="No fields to update")
    nulls = sorted(k for k, v in payload_dict.items() if v is None)
    if nulls:
        raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulls)}")
    return payload_dict


def _format_podcast(doc: dict) -> dict:
    return {
        "id": str(doc.get("_id")),
        "title": doc.get("title"),
        "author": doc.get("author"),
        "tags": doc.get("tags") or [],
        "website": doc.get("website"),
    }


def _format_episode(doc: dict) -> dict:
    podcast = doc.get("podcast")
    return {
        "id": str(doc.get("_id")),
        "podcast": str(podcast) if podcast is not None else None,
        "title": doc.get("title"),
        "description": doc.get("description"),
        "duration": doc.get("duration"),
    }


def _episode_to_storage(doc: dict) -> dict:
    """Swap the hex podcast reference for an ObjectId once validation passed."""
    stored = dict(doc)
    if stored.get("podcast") is not None:
        stored["podcast"] = ObjectId(stored["podcast"])
    return stored


# ======== Podcasts CRUD ========
@app.post("/podcasts", response_model=PodcastOut, status_code=status.HTTP_201_CREATED, tags=["Podcasts"])
def create_podcast(payload: PodcastIn, db=Depends(db_conn)):
    doc = _without_none(payload.model_dump())
    _validate("podcasts", doc)
    res = db["podcasts"].insert_one(doc)
    saved = db["podcasts"].find_one({"_id": res.inserted_id})
    if not saved:
        raise HTTPException(status_code=500, detail="Failed to retrieve created podcast")
    return PodcastOut(**_format_podcast(saved))


@app.get("/podcasts", response_model=list[PodcastOut], tags=["Podcasts"])
def list_podcasts(db=Depends(db_conn)):
    cursor = db["podcasts"].find().sort("_id", -1)
    return [PodcastOut(**_format_podcast(r)) for r in cursor]


@app.get("/podcasts/{id}", response_model=PodcastOut, tags=["Podcasts"])
def get_podcast(id: str, db=Depends(db_conn)):
    doc = db["podcasts"].find_one({"_id": _parse_object_id(id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Podcast not found")
    return PodcastOut(**_format_podcast(doc))


@app.put("/podcasts/{id}", response_model=dict, tags=["Podcasts"])
def replace_podcast(id: str, payload: PodcastIn, db=Depends(db_conn)):
    oid = _parse_object_id(id)
    doc = _without_none(payload.model_dump())
    _validate("podcasts", doc)
    result = db["podcasts"].replace_one({"_id": oid}, doc)
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Podcast not found")
    return {"updated": result.modified_count}


@app.patch("/podcasts/{id}", response_model=dict, tags=["Podcasts"])
def patch_podcast(id: str, payload: PodcastPatch, db=Depends(db_conn)):
    oid = _parse_object_id(id)
    doc = db["podcasts"].find_one({"_id": oid})
    if not doc:
        raise HTTPException(status_code=404, detail="Podcast not found")
    payload_dict = _patch_fields(payload)
    _validate("podcasts", payload_dict)
    merged = {k: v for k, v in doc.items() if k != "_id"}
    merged.update(payload_dict)
    _validate("podcasts", _without_none(merged))
    result = db["podcasts"].update_one({"_id": oid}, {"$set": payload_dict})
    return {"updated": result.modified_count}


@app.delete("/podcasts/{id}", response_model=dict, tags=["Podcasts"])
def delete_podcast(id: str, db=Depends(db_conn)):
    result = db["podcasts"].delete_one({"_id": _parse_object_id(id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Podcast not found")
    return {"deleted": result.deleted_count}


@app.get("/podcasts/{id}/total-duration", response_model=TotalDurationOut, tags=["Podcasts"])
def get_total_duration(id: str, db=Depends(db_conn)):
    _parse_object_id(id)
    rows = total_duration(db, id)
    total = rows[0]["total"] if rows else 0
    return TotalDurationOut(podcast_id=id, total=total)


# ======== Episodes CRUD ========
@app.post("/episodes", response_model=EpisodeOut, status_code=status.HTTP_201_CREATED, tags=["Episodes"])
def create_episode(payload: EpisodeIn, db=Depends(db_conn)):
    doc = _without_none(payload.model_dump())
    _validate("episodes", doc)
    stored = _episode_to_storage(doc)
    if "podcast" in stored and not db["podcasts"].find_one({"_id": stored["podcast"]}):
        raise HTTPException(status_code=404, detail="Podcast not found")
    res = db["episodes"].insert_one(stored)
    saved = db["episodes"].find_one({"_id": res.inserted_id})
    if not saved:
        raise HTTPException(status_code=500, detail="Failed to retrieve created episode")
    return EpisodeOut(**_format_episode(saved))


@app.get("/episodes", response_model=list[EpisodeOut], tags=["Episodes"])
def list_episodes(
    duration: Optional[int] = Query(default=None, description="Exact duration in minutes"),
    min_duration: Optional[int] = Query(default=None, description="Only episodes longer than this"),
    db=Depends(db_conn),
):
    query: dict = {}
    if duration is not None and min_duration is not None:
        query["duration"] = {"$eq": duration, "$gt": min_duration}
    elif duration is not None:
        query["duration"] = duration
    elif min_duration is not None:
        query["duration"] = {"$gt": min_duration}
    sort_key = "duration" if min_duration is not None else "_id"
    cursor = db["episodes"].find(query).sort(sort_key, -1)
    return [EpisodeOut(**_format_episode(r)) for r in cursor]


@app.get("/episodes/{id}", response_model=EpisodeOut, tags=["Episodes"])
def get_episode(id: str, db=Depends(db_conn)):
    doc = db["episodes"].find_one({"_id": _parse_object_id(id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Episode not found")
    return EpisodeOut(**_format_episode(doc))


@app.patch("/episodes/{id}", response_model=dict, tags=["Episodes"])
def patch_episode(id: str, payload: EpisodePatch, db=Depends(db_conn)):
    oid = _parse_object_id(id)
    doc = db["episodes"].find_one({"_id": oid})
    if not doc:
        raise HTTPException(status_code=404, detail="Episode not found")
    payload_dict = _patch_fields(payload)
    _validate("episodes", payload_dict)
    # validate the merged document in its wire form (hex podcast id)
    merged = _format_episode(doc)
    merged.pop("id")
    merged.update(payload_dict)
    _validate("episodes", _without_none(merged))
    result = db["episodes"].update_one({"_id": oid}, {"$set": _episode_to_storage(payload_dict)})
    return {"updated": result.modified_count}


@app.delete("/episodes/{id}", response_model=dict, tags=["Episodes"])
def delete_episode(id: str, db=Depends(db_conn)):
    result = db["episodes"].delete_one({"_id": _parse_object_id(id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Episode not found")
    return {"deleted": result.deleted_count}


@app.get("/episodes-with-podcast", response_model=list[PodcastEpisodeOut], tags=["Episodes"])
def list_episodes_with_podcast(db=Depends(db_conn)):
    out = []
    for row in episodes_with_podcast_models(db):
        podcast = row.podcast.to_document() if row.podcast else {}
        out.append(
            PodcastEpisodeOut(
                id=str(row.id),
                podcast=PodcastOut(**_format_podcast(podcast)),
                title=row.title,
                description=row.description,
                duration=row.duration,
            )
        )
    return out


@app.get("/health", response_model=dict, tags=["Health"])
def health(db=Depends(db_conn)):
    # Simple ping
    try:
        db.client.admin.command("ping")
        return {"status": "ok"}
    except Exception:
        raise HTTPException(status_code=500, detail="db ping failed")

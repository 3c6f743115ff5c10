# schema.py
import jsonschema
from jsonschema import FormatChecker

podcasts_schema = {
    "bsonType": "object",
    "properties": {
        "title": {"bsonType": "string"},
        "author": {"bsonType": "string"},
        "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
        "website": {"bsonType": "string"}
    }
}

episodes_schema = {
    "bsonType": "object",
    "properties": {
        "podcast": {"bsonType": "objectId"},
        "title": {"bsonType": "string"},
        "description": {"bsonType": "string"},
        # Anything shorter is rejected by the server, which is what the
        # rollback sample in transactions.py relies on.
        "duration": {"bsonType": "int", "minimum": 2}
    }
}

COLLECTION_SCHEMAS = {
    "podcasts": podcasts_schema,
    "episodes": episodes_schema,
}

_OBJECT_ID_PATTERN = "^[0-9a-fA-F]{24}$"
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_JSON_SCHEMA_CACHE: dict = {}


def _bson_property_to_jsonschema(prop: dict) -> dict:
    bson_type = prop.get("bsonType")
    types = bson_type if isinstance(bson_type, list) else [bson_type]
    json_types = []
    prop_schema: dict = {}
    for t in types:
        if t == "string":
            json_types.append("string")
        elif t == "int":
            json_types.append("integer")
            if "long" not in types:
                # pymongo stores ints outside this range as int64, which "int" rejects
                prop_schema["minimum"] = INT32_MIN
                prop_schema["maximum"] = INT32_MAX
        elif t == "long":
            json_types.append("integer")
        elif t == "bool":
            json_types.append("boolean")
        elif t == "array":
            json_types.append("array")
            if "items" in prop:
                prop_schema["items"] = _bson_property_to_jsonschema(prop["items"])
        elif t == "objectId":
            # ids travel as hex strings until they reach the driver
            json_types.append("string")
            prop_schema["pattern"] = _OBJECT_ID_PATTERN
        elif t == "null":
            json_types.append("null")
        else:
            json_types.append("string")
    prop_schema["type"] = json_types[0] if len(json_types) == 1 else json_types
    if "minimum" in prop:
        prop_schema["minimum"] = max(prop["minimum"], prop_schema.get("minimum", prop["minimum"]))
    if "maximum" in prop:
        prop_schema["maximum"] = min(prop["maximum"], prop_schema.get("maximum", prop["maximum"]))
    return prop_schema


def bson_to_jsonschema(bson_schema: dict) -> dict:
    props = {
        key: _bson_property_to_jsonschema(prop)
        for key, prop in bson_schema.get("properties", {}).items()
    }
    json_schema = {"type": "object", "properties": props}
    if "required" in bson_schema:
        json_schema["required"] = bson_schema["required"]
    return json_schema


def validate_document(collection: str, doc: dict) -> None:
    """Check ``doc`` against the validator the server applies to ``collection``.

    Raises ``jsonschema.ValidationError`` on the first violation. Collections
    without a validator accept anything.
    """
    bson_sch = COLLECTION_SCHEMAS.get(collection)
    if bson_sch is None:
        return
    if collection not in _JSON_SCHEMA_CACHE:
        _JSON_SCHEMA_CACHE[collection] = bson_to_jsonschema(bson_sch)
    jsonschema.validate(instance=doc, schema=_JSON_SCHEMA_CACHE[collection], format_checker=FormatChecker())

"""BSON helper utilities."""
import json
import uuid
from bson import ObjectId
from datetime import datetime, date
import bson

class BSONEncoder(json.JSONEncoder):
    """JSON encoder that handles BSON types like ObjectId and datetime."""
    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, bson.Binary):
            return str(obj)
        if isinstance(obj, bson.Decimal128):
            return float(obj.to_decimal())
        if isinstance(obj, bson.Int64):
            return int(obj)
        if isinstance(obj, bson.MaxKey):
            return "MaxKey"
        if isinstance(obj, bson.MinKey):
            return "MinKey"
        if isinstance(obj, bson.Timestamp):
            return {"t": obj.time, "i": obj.inc}
        if isinstance(obj, bson.Regex):
            return {"pattern": obj.pattern, "flags": obj.flags}
        if isinstance(obj, (uuid.UUID, bson.Code, bytes)):
            return str(obj)
        return super().default(obj)

def dumps_pretty(data) -> str:
    """Serialize BSON data to indented JSON text."""
    return json.dumps(data, cls=BSONEncoder, indent=2)

def parse_bson_to_json(bson_data):
    """Convert BSON data to JSON-serializable format."""
    return json.loads(json.dumps(bson_data, cls=BSONEncoder))

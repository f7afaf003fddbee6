"""Tests for BSON to JSON serialization."""
import json
from datetime import datetime

from bson import Decimal128, Int64, ObjectId, Timestamp

from mongo_mcp.utils.bson_helpers import dumps_pretty, parse_bson_to_json

def test_bson_values_become_json():
    doc = {
        "_id": ObjectId("65a1b2c3d4e5f60718293a4b"),
        "created": datetime(2024, 5, 1, 12, 30),
        "price": Decimal128("19.99"),
        "stock": Int64(12),
        "ts": Timestamp(1700000000, 3),
        "tags": ["a", "b"],
    }
    assert parse_bson_to_json(doc) == {
        "_id": "65a1b2c3d4e5f60718293a4b",
        "created": "2024-05-01T12:30:00",
        "price": 19.99,
        "stock": 12,
        "ts": {"t": 1700000000, "i": 3},
        "tags": ["a", "b"],
    }

def test_dumps_pretty_indents_two_spaces():
    text = dumps_pretty({"color": "#000", "category": "shoes"})
    assert text == '{\n  "color": "#000",\n  "category": "shoes"\n}'

def test_scalar_documents_round_trip():
    doc = {"name": "Jane", "age": 25, "score": 9.5, "active": True, "note": None}
    assert json.loads(dumps_pretty(doc)) == doc

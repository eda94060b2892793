"""Node palette endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from marketflow.graph.node_data import editable_fields
from marketflow.graph.palette import CATEGORIES, definitions_by_category

router = APIRouter()


@router.get("/palette")
def get_palette() -> dict:
    """Node definitions grouped by category, in sidebar order."""
    grouped = definitions_by_category()
    return {
        "categories": [
            {
                "name": category,
                "nodes": [
                    {**d.to_dict(), "fields": editable_fields(d.type)}
                    for d in grouped.get(category, [])
                ],
            }
            for category in CATEGORIES
        ]
    }

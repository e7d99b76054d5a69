"""Primavera P6 XER schedule parsing and import."""
from .codes import (
    ActivityStatus,
    RelationshipType,
    hours_to_workdays,
    is_critical_activity,
    map_xer_relation_type,
    map_xer_status,
)
from .decoder import Table, decode
from .io import ParseResult, XerProject, XerTask, XerTaskPred, XerWbs
from .mapper import map_to_domain, parse_xer

__version__ = "0.1.0"

__all__ = [
    "ActivityStatus",
    "RelationshipType",
    "ParseResult",
    "Table",
    "XerProject",
    "XerTask",
    "XerTaskPred",
    "XerWbs",
    "decode",
    "hours_to_workdays",
    "is_critical_activity",
    "map_to_domain",
    "map_xer_relation_type",
    "map_xer_status",
    "parse_xer",
]

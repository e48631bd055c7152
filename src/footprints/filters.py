"""Compile region keys and tag/scope selections into MapLibre filter expressions."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from .schemas import Scope, VisitRecord

FilterExpr = List[Any]

# Never the name or code of a real feature.
EMPTY_SENTINEL = ""

REGION_PROPERTY = {
    Scope.WORLD: "ISO3166-1-Alpha-2",
    Scope.CN: "name",
    Scope.US: "name",
}


def compile_region_filter(keys: Iterable[str], scope: Scope = Scope.WORLD) -> FilterExpr:
    values = sorted(set(keys)) or [EMPTY_SENTINEL]
    return ["in", ["get", REGION_PROPERTY[scope]], ["literal", values]]


def compile_point_filter(tag: str, scope: Scope) -> FilterExpr:
    clauses: FilterExpr = [["==", ["get", "tag"], tag]]
    if scope.country:
        clauses.append(["==", ["get", "countryIso2"], scope.country])
    return ["all", *clauses]


def point_features(records: Iterable[VisitRecord]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": [record.place.lon, record.place.lat],
                },
                "properties": {
                    "id": record.id,
                    "name": record.place.name,
                    "tag": record.tag,
                    "date": record.date,
                    "countryIso2": record.place.country_iso2,
                },
            }
            for record in records
        ],
    }


def _value(expr: Any, properties: Mapping[str, Any]) -> Any:
    if isinstance(expr, list) and expr:
        op = expr[0]
        if op == "get":
            return properties.get(expr[1])
        if op == "literal":
            return expr[1]
        return evaluate_filter(expr, properties)
    return expr


def evaluate_filter(expr: FilterExpr, properties: Mapping[str, Any]) -> bool:
    """Evaluate the expressions produced by this module against a property bag."""
    op = expr[0]
    if op == "all":
        return all(evaluate_filter(clause, properties) for clause in expr[1:])
    if op == "==":
        return _value(expr[1], properties) == _value(expr[2], properties)
    if op == "in":
        needle = _value(expr[1], properties)
        haystack = _value(expr[2], properties)
        return needle is not None and needle in haystack
    raise ValueError(f"Unsupported filter operator: {op!r}")

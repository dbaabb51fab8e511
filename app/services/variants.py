"""Variant/attribute reshaping for product detail documents.

Works on the nested variant documents produced by ``app.utils.rows.variant_row``::

    {"id": ..., "variant_attributes": [
        {"attribute_value_id": ..., "attribute_values": {
            "id": ..., "value": "red", "display_value": "Red", "metadata": {...},
            "attribute_types": {"id": ..., "name": "color", "display_name": "Color"}}}]}

Everything here is pure: no I/O, deterministic for a given input order.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

COMBINATION_SEPARATOR = "|"
PAIR_SEPARATOR = ":"


def _linked_values(variant: Dict[str, Any]) -> Iterable[Tuple[Dict[str, Any], Dict[str, Any]]]:
    """Yield (attribute_value, attribute_type) for each complete link of a variant."""
    for link in variant.get("variant_attributes") or []:
        if not link:
            continue
        value = link.get("attribute_values")
        if not value:
            continue
        attr_type = value.get("attribute_types")
        if not attr_type:
            continue
        yield value, attr_type


def build_attribute_types(variants: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Distinct attribute types across all variants, each with its distinct values.

    Types and values keep first-seen order; de-duplication is by id.
    """
    types: Dict[Any, Dict[str, Any]] = {}
    seen_values: Dict[Any, set] = {}
    for variant in variants:
        for value, attr_type in _linked_values(variant):
            type_id = attr_type.get("id")
            entry = types.get(type_id)
            if entry is None:
                entry = {
                    "id": type_id,
                    "name": attr_type.get("name"),
                    "displayName": attr_type.get("display_name"),
                    "values": [],
                }
                types[type_id] = entry
                seen_values[type_id] = set()
            if value.get("id") in seen_values[type_id]:
                continue
            seen_values[type_id].add(value.get("id"))
            entry["values"].append({
                "id": value.get("id"),
                "value": value.get("value"),
                "displayValue": value.get("display_value"),
                "metadata": value.get("metadata"),
            })
    return list(types.values())


def combination_key(selection: Dict[str, str]) -> Optional[str]:
    """Canonical ``type:value|type:value`` key, types sorted by name. None when empty."""
    if not selection:
        return None
    return COMBINATION_SEPARATOR.join(
        f"{name}{PAIR_SEPARATOR}{value}" for name, value in sorted(selection.items(), key=lambda kv: kv[0])
    )


def build_variant_combinations(variants: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Map each variant's combination key to its id.

    Variants without attribute links get no key. On a key collision the later
    variant wins. Two values of one type on the same variant keep the last one.
    """
    combinations: Dict[str, Any] = {}
    for variant in variants:
        selection: Dict[str, str] = {}
        for value, attr_type in _linked_values(variant):
            selection[attr_type.get("name")] = value.get("value")
        key = combination_key(selection)
        if key is not None:
            combinations[key] = variant.get("id")
    return combinations


def review_statistics(comments: List[Dict[str, Any]]) -> Tuple[int, float]:
    """Return ``(total_reviews, average_rating)``.

    Comments without a rating count toward the total and add 0 to the sum.
    The average is rounded half-up to two decimals; 0 when there are no comments.
    """
    total = len(comments)
    if total == 0:
        return 0, 0
    rating_sum = sum((c.get("rating") or 0) for c in comments)
    average = math.floor(rating_sum / total * 100 + 0.5) / 100
    return total, average


def assemble_product(
    product: Dict[str, Any],
    variants: List[Dict[str, Any]],
    comments: List[Dict[str, Any]],
) -> Dict[str, Any]:
    total_reviews, average_rating = review_statistics(comments)
    document = dict(product)
    if not variants:
        document.update(
            product_variants=[],
            attribute_types=[],
            variant_combinations={},
        )
    else:
        document.update(
            product_variants=variants,
            attribute_types=build_attribute_types(variants),
            variant_combinations=build_variant_combinations(variants),
        )
    document.update(
        comments=comments,
        average_rating=average_rating,
        total_reviews=total_reviews,
    )
    return document

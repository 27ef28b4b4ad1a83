"""
Naming helpers used by relation inference
"""
import re
from typing import Dict, Mapping, Optional

DEFAULT_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "mouse": "mice",
}

_TRAILING_ID = re.compile(r"_id$")
_TRAILING_BARE_ID = re.compile(r"id$")


def is_potential_foreign_key(column_name: str) -> bool:
    """Check if a column name follows a foreign key naming convention"""
    name = column_name.lower()
    return (
        name.endswith("_id")
        or name.endswith("id")
        or "_id_" in name
        or name == "id"
        or "foreign" in name
    )


def is_bare_id(column_name: str) -> bool:
    return column_name.lower() == "id"


def candidate_table_name(column_name: str) -> str:
    """
    'customer_id' -> 'customer', 'orderId' -> 'order', 'parent_node_id' -> 'parent'

    A trailing '_id' is stripped in preference to a bare trailing 'id'; only
    one suffix is removed.
    """
    name = column_name.lower()
    if _TRAILING_ID.search(name):
        name = _TRAILING_ID.sub("", name)
    else:
        name = _TRAILING_BARE_ID.sub("", name)
    tokens = name.replace("_", " ").split(" ")
    return tokens[0]


def table_names_match(
    table_name: str,
    candidate: str,
    irregular_plurals: Optional[Mapping[str, str]] = None,
) -> bool:
    """Case-insensitive match allowing simple and irregular singular/plural forms"""
    table = table_name.lower()
    match = candidate.lower()

    if table == match:
        return True

    for suffix in ("s", "es"):
        if table == f"{match}{suffix}" or f"{table}{suffix}" == match:
            return True

    irregulars = DEFAULT_IRREGULAR_PLURALS if irregular_plurals is None else irregular_plurals
    for singular, plural in irregulars.items():
        singular, plural = singular.lower(), plural.lower()
        if (table, match) in ((singular, plural), (plural, singular)):
            return True

    return False

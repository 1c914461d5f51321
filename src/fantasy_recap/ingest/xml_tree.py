"""Convert provider XML into a loosely-typed nested tree.

The tree mirrors what a non-array XML parser produces: an element holding only
text becomes a string, attributes live under ``"$"``, mixed text lives under
``"_"``, and a child tag becomes a list only when it repeats. Callers must go
through :mod:`fantasy_recap.ingest.normalize` to get stable sequences back.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Mapping

from fantasy_recap.errors import StructuralParseError


ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_node(element: ET.Element) -> Any:
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text

    node: dict[str, Any] = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {_local_name(key): value for key, value in element.attrib.items()}
    for child in children:
        key = _local_name(child.tag)
        value = element_to_node(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]
    if text:
        node[TEXT_KEY] = text
    return node


def parse_xml_tree(document: str | bytes) -> dict[str, Any]:
    """Parse an XML payload, keeping the root element as the single top-level key."""

    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise StructuralParseError((), f"document is not well-formed XML: {exc}") from exc
    return {_local_name(root.tag): element_to_node(root)}


def load_document(document: Any) -> dict[str, Any]:
    """Accept raw XML text/bytes or an already-parsed mapping."""

    if isinstance(document, (str, bytes)):
        if not document.strip():
            raise StructuralParseError((), "document is empty")
        return parse_xml_tree(document)
    if isinstance(document, Mapping):
        return dict(document)
    raise StructuralParseError((), f"unsupported document type {type(document).__name__}")

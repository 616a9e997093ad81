"""XML parser for hibernate-generic entity exports.

This module decodes the entity dump written by ORM export tools (for example
a Confluence ``entities.xml``) into flat ObjectRecord values. The format uses:
- A root element (normally ``<hibernate-generic>``)
- ``<object class="..." package="...">`` children, each with an ``<id>``
- ``<property name="...">`` children carrying text, CDATA, or an ``<id>``
  that references another object
"""

from __future__ import annotations

import logging

from lxml import etree

from ..core.errors import ExportParseError
from ..core.types import ObjectRecord, Property

logger = logging.getLogger(__name__)


def parse_export(data: bytes | str) -> list[ObjectRecord]:
    """Parse a serialized entity export into ObjectRecords.

    Example export:
        <hibernate-generic datetime="2020-01-01 00:00:00">
          <object class="BlogPost" package="com.atlassian.confluence.pages">
            <id name="id">42</id>
            <property name="title"><![CDATA[Hello World]]></property>
            <property name="creationDate">2020-01-01 10:00:00.000</property>
          </object>
          <object class="BodyContent" package="com.atlassian.confluence.core">
            <id name="id">43</id>
            <property name="body"><![CDATA[<p>Hi</p>]]></property>
            <property name="content" class="BlogPost"><id name="id">42</id></property>
          </object>
        </hibernate-generic>

    Args:
        data: Raw export content

    Returns:
        ObjectRecords in document order. Records of unknown classes are kept.

    Raises:
        ExportParseError: If the markup is not well-formed
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(data, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise ExportParseError(f"Malformed export markup: {exc}") from exc

    records = [_parse_object(node) for node in root.findall("object")]
    logger.debug("Parsed %d records from export", len(records))
    return records


def _parse_object(node: etree._Element) -> ObjectRecord:
    properties = [
        Property(name=prop.get("name", ""), id=_node_id(prop), text=_direct_text(prop))
        for prop in node.findall("property")
    ]
    return ObjectRecord(id=_node_id(node) or "", cls=node.get("class", ""), properties=properties)


def _node_id(node: etree._Element) -> str | None:
    """Return the id carried by a node as an ``<id>`` child or an ``id`` attribute."""
    child = node.find("id")
    if child is not None:
        return (child.text or "").strip()
    attr = node.get("id")
    if attr is not None:
        return attr.strip()
    return None


def _direct_text(node: etree._Element) -> str:
    """Collect the node's own character data, skipping text of nested elements."""
    parts = [node.text or ""]
    for child in node:
        parts.append(child.tail or "")
    return "".join(parts)

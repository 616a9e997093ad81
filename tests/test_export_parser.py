"""Tests for the entity export parser."""

import pytest

from blog_migrator.core.errors import ExportParseError
from blog_migrator.input.export_parser import parse_export


EXPORT = """<?xml version="1.0" encoding="UTF-8"?>
<hibernate-generic datetime="2021-05-01 12:00:00">
  <object class="BlogPost" package="com.atlassian.confluence.pages">
    <id name="id">100</id>
    <property name="title"><![CDATA[Hello "World"]]></property>
    <property name="creationDate">2020-01-01 09:30:00.000</property>
  </object>
  <object class="BodyContent" package="com.atlassian.confluence.core">
    <id name="id">200</id>
    <property name="body"><![CDATA[<p>See <a href="x">this</a></p>]]></property>
    <property name="content" class="BlogPost" package="com.atlassian.confluence.pages"><id name="id">100</id>
    </property>
  </object>
  <object class="SpaceDescription" package="com.atlassian.confluence.spaces">
    <id name="id">300</id>
    <property name="lowerTitle"><![CDATA[ignored]]></property>
  </object>
</hibernate-generic>
"""


def test_parse_export_returns_records_in_document_order():
    records = parse_export(EXPORT)

    assert [r.id for r in records] == ["100", "200", "300"]
    assert [r.cls for r in records] == ["BlogPost", "BodyContent", "SpaceDescription"]


def test_parse_export_preserves_property_order_and_text():
    post = parse_export(EXPORT)[0]

    assert [p.name for p in post.properties] == ["title", "creationDate"]
    assert post.properties[0].text == 'Hello "World"'
    assert post.properties[0].id is None
    assert post.properties[1].text == "2020-01-01 09:30:00.000"


def test_parse_export_captures_foreign_key_and_markup_body():
    body = parse_export(EXPORT)[1]

    content = body.find("content")
    assert content is not None
    assert content.id == "100"
    assert body.find("body").text == '<p>See <a href="x">this</a></p>'


def test_parse_export_keeps_unknown_classes():
    unknown = parse_export(EXPORT)[2]

    assert unknown.cls == "SpaceDescription"
    assert unknown.find("lowerTitle").text == "ignored"


def test_parse_export_accepts_bytes_and_id_attributes():
    data = (
        b'<hibernate-generic><object class="BlogPost" id="7">'
        b'<property name="content" id="8"/></object></hibernate-generic>'
    )

    record = parse_export(data)[0]

    assert record.id == "7"
    assert record.properties[0].id == "8"
    assert record.properties[0].text == ""


def test_parse_export_empty_root_yields_no_records():
    assert parse_export("<hibernate-generic/>") == []


@pytest.mark.parametrize(
    "data",
    [
        "",
        "<hibernate-generic><object class='BlogPost'></hibernate-generic>",
        "not xml at all",
    ],
)
def test_parse_export_rejects_malformed_markup(data):
    with pytest.raises(ExportParseError):
        parse_export(data)

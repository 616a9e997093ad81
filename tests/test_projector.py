"""Tests for projecting export records into drafts and bodies."""

from datetime import datetime
import logging

from blog_migrator.core.projector import (
    normalize_title,
    parse_creation_date,
    project_record,
    project_records,
)
from blog_migrator.core.types import (
    ZERO_DATE,
    BodyFragment,
    ObjectRecord,
    PostDraft,
    Property,
    RunReport,
    Unrecognized,
)


def _post(record_id: str, title: str, created: str) -> ObjectRecord:
    return ObjectRecord(
        id=record_id,
        cls="BlogPost",
        properties=[Property(name="title", text=title), Property(name="creationDate", text=created)],
    )


def _body(record_id: str, ref: str, text: str) -> ObjectRecord:
    return ObjectRecord(
        id=record_id,
        cls="BodyContent",
        properties=[Property(name="body", text=text), Property(name="content", id=ref)],
    )


def test_blog_post_becomes_draft():
    draft = project_record(_post("10", 'Say "hi"', "2020-06-01 08:15:00"))

    assert draft == PostDraft(
        title="Say 'hi'", body_ref="10", creation_date=datetime(2020, 6, 1, 8, 15)
    )


def test_body_content_becomes_fragment_keyed_by_content_id():
    fragment = project_record(_body("20", "10", "<p>text</p>"))

    assert fragment == BodyFragment(id="10", text="<p>text</p>")


def test_unknown_class_is_unrecognized():
    record = ObjectRecord(id="30", cls="Attachment")

    projected = project_record(record)

    assert isinstance(projected, Unrecognized)
    assert projected.record is record


def test_blog_post_without_properties_keeps_defaults():
    draft = project_record(ObjectRecord(id="11", cls="BlogPost"))

    assert draft == PostDraft(title="", body_ref="11", creation_date=ZERO_DATE)


def test_body_content_without_content_reference_has_empty_id():
    record = ObjectRecord(id="21", cls="BodyContent", properties=[Property(name="body", text="x")])

    assert project_record(record) == BodyFragment(id="", text="x")


def test_first_property_with_a_name_is_used():
    record = ObjectRecord(
        id="12",
        cls="BlogPost",
        properties=[Property(name="title", text="First"), Property(name="title", text="Second")],
    )

    assert record.find("title").text == "First"
    assert project_record(record).title == "First"


def test_malformed_creation_date_warns_and_uses_zero_date(caplog):
    report = RunReport()

    with caplog.at_level(logging.WARNING):
        draft = project_record(_post("10", "Broken", "yesterday"), report)

    assert draft.creation_date == ZERO_DATE
    assert draft.title == "Broken"
    assert len(report.warnings) == 1
    assert "10" in report.warnings[0]
    assert "Invalid creation date" in caplog.text


def test_missing_properties_leave_defaults():
    draft = project_record(ObjectRecord(id="11", cls="BlogPost"))

    assert draft == PostDraft(title="", body_ref="11", creation_date=ZERO_DATE)


def test_project_records_splits_drafts_and_bodies():
    records = [
        _post("1", "A", "2020-01-01 00:00:00"),
        _body("2", "1", "first"),
        ObjectRecord(id="3", cls="Page"),
        _post("4", "B", "2020-01-02 00:00:00"),
        _body("5", "1", "second"),
    ]

    projection = project_records(records)

    assert [d.title for d in projection.drafts] == ["A", "B"]
    assert projection.bodies == {"1": "second"}
    assert projection.unrecognized == 1


def test_parse_creation_date_accepts_fractional_seconds():
    assert parse_creation_date("2019-06-05 19:24:12.5") == datetime(2019, 6, 5, 19, 24, 12, 500000)
    assert parse_creation_date("2019-06-05 19:24:12.000") == datetime(2019, 6, 5, 19, 24, 12)


def test_normalize_title_replaces_double_quotes_only():
    assert normalize_title('"Quoted" it\'s') == "'Quoted' it's"

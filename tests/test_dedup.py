"""Tests for draft deduplication and canonicalization."""

from datetime import date, datetime

from blog_migrator.core.dedup import canonicalize, merge_drafts
from blog_migrator.core.types import ZERO_DATE, AuthorityIndex, PostDraft, RunReport


def test_merge_keeps_latest_creation_date():
    drafts = [
        PostDraft(title="Hello World", body_ref="1", creation_date=datetime(2020, 1, 1)),
        PostDraft(title="Hello World", body_ref="2", creation_date=datetime(2020, 6, 1)),
        PostDraft(title="Hello World", body_ref="3", creation_date=datetime(2020, 3, 1)),
    ]

    merged = merge_drafts(drafts)

    assert len(merged) == 1
    assert merged[0].body_ref == "2"


def test_merge_tie_keeps_first_seen():
    when = datetime(2021, 5, 5, 10, 0)
    drafts = [
        PostDraft(title="Same", body_ref="first", creation_date=when),
        PostDraft(title="Same", body_ref="second", creation_date=when),
    ]

    assert [d.body_ref for d in merge_drafts(drafts)] == ["first"]


def test_merge_drops_empty_titles():
    drafts = [
        PostDraft(title="", body_ref="1", creation_date=datetime(2020, 1, 1)),
        PostDraft(title="Kept", body_ref="2", creation_date=datetime(2020, 1, 1)),
    ]

    assert [d.title for d in merge_drafts(drafts)] == ["Kept"]


def test_merge_orders_by_first_appearance_of_title():
    drafts = [
        PostDraft(title="B", body_ref="1", creation_date=datetime(2020, 1, 1)),
        PostDraft(title="A", body_ref="2", creation_date=datetime(2020, 1, 1)),
        PostDraft(title="B", body_ref="3", creation_date=datetime(2021, 1, 1)),
    ]

    assert [(d.title, d.body_ref) for d in merge_drafts(drafts)] == [("B", "3"), ("A", "2")]


def test_zero_date_draft_loses_to_dated_duplicate():
    drafts = [
        PostDraft(title="T", body_ref="dated", creation_date=datetime(2019, 1, 1)),
        PostDraft(title="T", body_ref="broken", creation_date=ZERO_DATE),
    ]

    assert merge_drafts(drafts)[0].body_ref == "dated"


def test_canonicalize_without_authority_keeps_creation_date():
    drafts = [
        PostDraft(title="Hello World", body_ref="1", creation_date=datetime(2020, 1, 1)),
        PostDraft(title="Hello World", body_ref="2", creation_date=datetime(2020, 6, 1)),
    ]

    posts = canonicalize(drafts, {"2": "<p>new</p>"}, AuthorityIndex())

    assert len(posts) == 1
    assert posts[0].title == "Hello World"
    assert posts[0].publish_date == datetime(2020, 6, 1)
    assert posts[0].body == "<p>new</p>"


def test_canonicalize_authority_date_overrides_creation_date():
    drafts = [PostDraft(title="My Post", body_ref="1", creation_date=datetime(2020, 6, 1, 13, 45))]
    authority = AuthorityIndex(title_to_date={"My Post": date(2021, 3, 15)})
    report = RunReport()

    posts = canonicalize(drafts, {"1": "body"}, authority, report)

    assert posts[0].publish_date == datetime(2021, 3, 15)
    assert report.date_overrides == 1
    assert report.posts == 1


def test_canonicalize_missing_body_warns_and_uses_empty_body():
    drafts = [
        PostDraft(title="No Body", body_ref="404", creation_date=datetime(2020, 1, 1)),
        PostDraft(title="Has Body", body_ref="1", creation_date=datetime(2020, 1, 2)),
    ]
    report = RunReport()

    posts = canonicalize(drafts, {"1": "text"}, AuthorityIndex(), report)

    assert [p.body for p in posts] == ["", "text"]
    assert report.warnings == ["Couldn't find a body for post `No Body`"]

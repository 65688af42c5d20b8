from datetime import date, datetime, timedelta, timezone

import pytest

from postmanifest.models.errors import ErrorKind
from postmanifest.services.validator import PostValidationFailed, parse_date, validate_post


def _validate(metadata, body="Body.\n"):
    return validate_post(metadata, source_path="posts/a.md", slug="a", body=body, body_line=5)


def _kinds(excinfo):
    return [(error.kind, getattr(error, "field", None)) for error in excinfo.value.errors]


def test_valid_metadata_becomes_record():
    record = _validate(
        {
            "title": "  Thread Pools  ",
            "date": "2025-12-09T15:34:46.203",
            "draft": True,
            "tags": ["c", "a", "b"],
        }
    )

    assert record.title == "Thread Pools"
    assert record.date == datetime(2025, 12, 9, 15, 34, 46, 203000)
    assert record.draft is True
    assert record.tags == ("c", "a", "b")
    assert record.slug == "a"
    assert record.source_path == "posts/a.md"
    assert record.body_line == 5


def test_draft_defaults_to_false_and_tags_to_empty():
    record = _validate({"title": "T", "date": date(2025, 11, 28)})

    assert record.draft is False
    assert record.tags == ()
    assert record.date == datetime(2025, 11, 28)


def test_unknown_keys_are_preserved():
    record = _validate({"title": "T", "date": "2025-01-01", "cover": "img.png", "series": {"part": 2}})

    assert dict(record.extra) == {"cover": "img.png", "series": {"part": 2}}


def test_missing_title():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"date": "2025-01-01"})

    assert _kinds(excinfo) == [(ErrorKind.VALIDATION_ERROR, "title")]


def test_blank_title():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": "   ", "date": "2025-01-01"})

    assert _kinds(excinfo) == [(ErrorKind.VALIDATION_ERROR, "title")]


def test_non_string_title_is_type_mismatch():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": 1984, "date": "2025-01-01"})

    assert _kinds(excinfo) == [(ErrorKind.TYPE_MISMATCH, "title")]


def test_missing_date():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": "T"})

    assert _kinds(excinfo) == [(ErrorKind.VALIDATION_ERROR, "date")]


@pytest.mark.parametrize("value", ["yesterday", "2025-13-40", 12345, ""])
def test_unparseable_date(value):
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": "T", "date": value})

    assert _kinds(excinfo) == [(ErrorKind.INVALID_DATE, "date")]


def test_draft_must_be_boolean():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": "T", "date": "2025-01-01", "draft": "yes please"})

    error = excinfo.value.errors[0]
    assert error.kind is ErrorKind.TYPE_MISMATCH
    assert error.field == "draft"
    assert error.expected == "a boolean"
    assert error.actual == "string"


def test_tags_must_be_a_list():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": "T", "date": "2025-01-01", "tags": "kafka"})

    assert _kinds(excinfo) == [(ErrorKind.TYPE_MISMATCH, "tags")]


def test_non_string_tag_entries_are_reported_individually():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"title": "T", "date": "2025-01-01", "tags": ["ok", 3, True]})

    assert _kinds(excinfo) == [
        (ErrorKind.TYPE_MISMATCH, "tags[1]"),
        (ErrorKind.TYPE_MISMATCH, "tags[2]"),
    ]


def test_all_problems_of_one_file_are_reported():
    with pytest.raises(PostValidationFailed) as excinfo:
        _validate({"draft": "no"})

    assert _kinds(excinfo) == [
        (ErrorKind.VALIDATION_ERROR, "title"),
        (ErrorKind.VALIDATION_ERROR, "date"),
        (ErrorKind.TYPE_MISMATCH, "draft"),
    ]


def test_summary_prefers_front_matter():
    record = _validate({"title": "T", "date": "2025-01-01", "summary": " Short. "}, body="Long body.")

    assert record.summary == "Short."


def test_parse_date_accepts_offsets_and_zulu():
    assert parse_date("2025-12-09T15:34:46+02:00") == datetime(
        2025, 12, 9, 15, 34, 46, tzinfo=timezone(timedelta(hours=2))
    )
    assert parse_date("2025-12-09T15:34:46Z") == datetime(2025, 12, 9, 15, 34, 46, tzinfo=timezone.utc)
    assert parse_date("2025-12-09") == datetime(2025, 12, 9)
    assert parse_date(None) is None

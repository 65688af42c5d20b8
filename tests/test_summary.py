from postmanifest.services.summary import MAX_SUMMARY_LENGTH, extract_summary


def test_description_is_used_when_summary_missing():
    assert extract_summary({"description": "From meta"}, "Body") == "From meta"


def test_first_paragraph_skips_headings_and_strips_markup():
    body = "# RabbitMQ\n\nQueues with **durable** [exchanges](https://example.com) and `ack`.\n\nSecond paragraph.\n"

    assert extract_summary({}, body) == "Queues with durable exchanges and ack."


def test_long_paragraph_is_truncated():
    body = "word " * 100

    summary = extract_summary({}, body)

    assert summary.endswith("...")
    assert len(summary) <= MAX_SUMMARY_LENGTH + 3


def test_body_without_paragraph():
    assert extract_summary({}, "```\ncode only\n```\n") == ""

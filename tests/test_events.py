from memebot.events import InlineQueryEvent, MessageEvent, parse_event


def test_inline_query():
    event = parse_event(
        {"inline_query": {"id": "42", "from": {"id": 7, "username": "bob"}, "query": " cat "}}
    )

    assert event == InlineQueryEvent(query_id="42", from_user_id=7, from_username="bob", query_text=" cat ")


def test_text_message():
    event = parse_event(
        {"message": {"chat": {"id": -5}, "from": {"id": 7, "username": "bob"}, "text": "/search cat"}}
    )

    assert isinstance(event, MessageEvent)
    assert event.chat_id == -5
    assert event.text == "/search cat"
    assert not event.has_photo
    assert event.text_or_caption == "/search cat"


def test_photo_message_keeps_variant_order():
    event = parse_event(
        {
            "message": {
                "chat": {"id": 1},
                "from": {"id": 7},
                "caption": "funny #meme",
                "photo": [{"file_id": "small"}, {"file_id": "medium"}, {"file_id": "large"}],
            }
        }
    )

    assert event.photo_variants == ("small", "medium", "large")
    assert event.largest_photo == "large"
    assert event.from_username is None
    assert event.text_or_caption == "funny #meme"


def test_inline_query_wins_over_message():
    event = parse_event(
        {
            "inline_query": {"id": "1", "from": {"id": 7}, "query": "x"},
            "message": {"chat": {"id": 1}, "from": {"id": 7}, "text": "/start"},
        }
    )

    assert isinstance(event, InlineQueryEvent)


def test_extra_fields_are_ignored():
    event = parse_event(
        {
            "update_id": 10,
            "message": {"message_id": 3, "date": 0, "chat": {"id": 1, "type": "private"}, "from": {"id": 7}, "text": "hi"},
        }
    )

    assert isinstance(event, MessageEvent)


def test_unsupported_shapes_are_rejected():
    assert parse_event({}) is None
    assert parse_event({"edited_message": {"chat": {"id": 1}}}) is None
    assert parse_event({"message": {"from": {"id": 7}, "text": "no chat"}}) is None
    assert parse_event({"inline_query": {"from": {"id": 7}, "query": "no id"}}) is None
    assert parse_event([1, 2]) is None
    assert parse_event(None) is None

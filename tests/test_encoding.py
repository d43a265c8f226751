from insta_mapper.encoding import repair_encoding, repair_text


def mojibake(text):
    return text.encode("utf-8").decode("latin-1")


def test_repairs_accented_text():
    assert repair_text(mojibake("café")) == "café"


def test_repairs_emoji():
    assert repair_text(mojibake("hi 👋🏽")) == "hi 👋🏽"


def test_plain_ascii_unchanged():
    assert repair_text("plain text") == "plain text"


def test_non_latin1_text_returned_unchanged():
    # Characters above U+00FF cannot be re-encoded as latin-1
    assert repair_text("already 👍 fine") == "already 👍 fine"


def test_invalid_utf8_bytes_returned_unchanged():
    # "Ã" alone is 0xC3, a truncated UTF-8 lead byte
    assert repair_text("Ã") == "Ã"


def test_recurses_through_containers():
    data = {
        "title": mojibake("Zoë"),
        "items": [mojibake("ñ"), 5, None, True, {"inner": mojibake("ü")}],
        "count": 3.5,
    }
    assert repair_encoding(data) == {
        "title": "Zoë",
        "items": ["ñ", 5, None, True, {"inner": "ü"}],
        "count": 3.5,
    }


def test_keys_are_not_rewritten():
    key = mojibake("é")
    assert list(repair_encoding({key: "x"})) == [key]

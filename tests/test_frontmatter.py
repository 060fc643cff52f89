import datetime
from pathlib import Path

import pytest

from pensmith.frontmatter import decode, encode, read_markdown, split_frontmatter, write_markdown


def test_decode_basic():
    raw = "---\ntitle: Hello\ntags:\n  - a\n  - b\n---\n\nBody line one.\n\nBody line two.\n"
    header, body = decode(raw)
    assert header == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "Body line one.\n\nBody line two."


@pytest.mark.parametrize(
    "header,body",
    [
        ({"title": "Post"}, "Just a body."),
        ({"title": "Dated", "date": datetime.date(2024, 5, 1), "word_count": 3}, "one two three"),
        ({"tags": ["x", "y"], "summary": "colon: inside", "published": True}, "# Heading\n\n- item\n---\nafter rule"),
        ({"title": "Unicodé ✓"}, "naïve café"),
    ],
)
def test_encode_then_decode_preserves_header_and_body(header, body):
    assert decode(encode(header, body)) == (header, body)


def test_no_delimiter_returns_input_whole():
    raw = "No frontmatter here.\n---\nstill body\n"
    assert decode(raw) == ({}, raw)


def test_delimiter_must_be_a_full_line():
    raw = "----\ntitle: x\n----\nbody"
    assert decode(raw) == ({}, raw)
    raw2 = "--- title: x\n---\nbody"
    assert decode(raw2) == ({}, raw2)


def test_unclosed_header_returns_original():
    raw = "---\ntitle: Draft\nno closing marker\n"
    assert split_frontmatter(raw) is None
    assert decode(raw) == ({}, raw)


def test_unparsable_header_returns_original():
    raw = "---\ntitle: [broken\n---\nBody\n"
    assert split_frontmatter(raw) is not None
    header, body = decode(raw)
    assert header == {}
    assert body == raw


def test_non_mapping_header_returns_original():
    raw = "---\n- one\n- two\n---\nBody"
    assert decode(raw) == ({}, raw)


def test_empty_header_block():
    assert decode("---\n---\n\nBody") == ({}, "Body")


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "---",
        "---\n",
        "\x00\x01---\n",
        "---\n---",
        "---\n\t: [\n---\nbody",
        ":\n---\n: :\n",
        "---\ntitle: Bad date\ndate: 2024-13-45\n---\nbody",
        "---\ndate: 2024-02-30\n---\nbody",
    ],
)
def test_decode_never_raises(raw):
    header, body = decode(raw)
    assert isinstance(header, dict)
    assert isinstance(body, str)


@pytest.mark.parametrize("value", ["2024-13-45", "2024-02-30"])
def test_impossible_date_returns_original(value):
    raw = f"---\ntitle: Bad date\ndate: {value}\n---\nbody"
    assert decode(raw) == ({}, raw)


def test_crlf_documents():
    raw = "---\r\ntitle: Win\r\n---\r\n\r\nBody\r\n"
    header, body = decode(raw)
    assert header == {"title": "Win"}
    assert body == "Body"


def test_encode_empty_header_is_verbatim():
    assert encode({}, "  body with spaces \n") == "  body with spaces \n"


def test_encode_layout():
    assert encode({"title": "T"}, "B") == "---\ntitle: T\n---\n\nB"


def test_read_and_write_markdown(tmp_path: Path):
    path = tmp_path / "nested" / "post.md"
    write_markdown(path, {"title": "Saved", "word_count": 2}, "two words")
    assert path.exists()
    assert read_markdown(path) == ({"title": "Saved", "word_count": 2}, "two words")


def test_read_markdown_degraded_is_not_an_error(tmp_path: Path):
    path = tmp_path / "bad.md"
    raw = "---\ntitle: [oops\n---\nbody"
    path.write_text(raw, encoding="utf-8")
    assert read_markdown(path) == ({}, raw)


def test_read_markdown_warns_on_unreadable_header(tmp_path: Path, capsys: pytest.CaptureFixture):
    path = tmp_path / "dated.md"
    raw = "---\ndate: 2024-13-45\n---\nbody"
    path.write_text(raw, encoding="utf-8")
    assert read_markdown(path) == ({}, raw)
    out = capsys.readouterr().out
    assert "WARNING:" in out
    assert "dated.md" in out


def test_read_markdown_without_header_is_silent(tmp_path: Path, capsys: pytest.CaptureFixture):
    path = tmp_path / "plain.md"
    path.write_text("just text", encoding="utf-8")
    assert read_markdown(path) == ({}, "just text")
    assert "WARNING" not in capsys.readouterr().out


def test_read_markdown_replaces_undecodable_bytes(tmp_path: Path):
    path = tmp_path / "latin1.md"
    path.write_bytes(b"caf\xe9 au lait")
    header, body = read_markdown(path)
    assert header == {}
    assert body == "caf\ufffd au lait"

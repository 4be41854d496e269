import io

from mcpgateway.prefixer import Prefixer

PREFIX = "  - "


def _strip(text):
    return "\n".join(line[len(PREFIX):] if line.startswith(PREFIX) else line for line in text.split("\n"))


def test_each_line_gets_prefix():
    out = io.StringIO()
    Prefixer(out, PREFIX).write("one\ntwo\n")
    assert out.getvalue() == PREFIX + "one\n" + PREFIX + "two\n"


def test_prefix_not_repeated_within_a_line_across_writes():
    out = io.StringIO()
    prefixer = Prefixer(out, PREFIX)
    prefixer.write("par")
    prefixer.write("tial\nnext")
    assert out.getvalue() == PREFIX + "partial\n" + PREFIX + "next"


def test_return_value_is_payload_length():
    prefixer = Prefixer(io.StringIO(), PREFIX)
    payload = "abc\ndef\n\n"
    assert prefixer.write(payload) == len(payload)


def test_empty_lines_are_prefixed():
    out = io.StringIO()
    Prefixer(out, PREFIX).write("\n\n")
    assert out.getvalue() == PREFIX + "\n" + PREFIX + "\n"


def test_stripping_prefixes_gives_original_text():
    out = io.StringIO()
    prefixer = Prefixer(out, PREFIX)
    chunks = ["first li", "ne\nsecond\n", "third"]
    for chunk in chunks:
        prefixer.write(chunk)
    assert _strip(out.getvalue()) == "".join(chunks)


def test_no_prefix_written_for_empty_payload():
    out = io.StringIO()
    Prefixer(out, PREFIX).write("")
    assert out.getvalue() == ""
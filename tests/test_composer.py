from notifyy.delivery.composer import compose_message, format_code


def test_title_is_bold_and_parts_are_newline_joined() -> None:
    text = compose_message(title="Deploy", message="prod is live", url="https://ci.example/42")
    assert text == "*Deploy*\nprod is live\nhttps://ci.example/42"


def test_absent_parts_leave_no_separators() -> None:
    assert compose_message(message="only body") == "only body"
    assert compose_message(title="only title") == "*only title*"
    assert compose_message(url="https://x") == "https://x"
    assert compose_message() == ""


def test_empty_strings_count_as_absent() -> None:
    assert compose_message(title="", message="body", url="") == "body"


def test_code_block_is_fenced_and_unescaped() -> None:
    text = compose_message(title="Crash", code="line one\\nline two")
    assert text == "*Crash*\n```\nline one\nline two\n```"


def test_code_smart_quotes_become_plain_quotes() -> None:
    assert format_code("print(“hi”)") == 'print("hi")'


def test_code_comes_before_url() -> None:
    text = compose_message(message="m", code="x", url="https://u")
    assert text.endswith("```\nhttps://u")

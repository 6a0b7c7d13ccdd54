from staleness.template import DEFAULT_MESSAGE, format_timestamp, render_alert


def test_render_substitutes_both_placeholders() -> None:
    rendered = render_alert("now={now} since={staletime}", now=1000, seen=0)

    assert rendered == f"now={format_timestamp(1000)} since={format_timestamp(0)}"
    assert "{now}" not in rendered
    assert "{staletime}" not in rendered


def test_default_message_renders_both_times() -> None:
    rendered = render_alert(DEFAULT_MESSAGE, now=2_000, seen=0)

    assert rendered == f"[{format_timestamp(2_000)}] stream is stale since {format_timestamp(0)}"


def test_unknown_tokens_are_left_alone() -> None:
    assert render_alert("{other} {0} stale", now=0, seen=0) == "{other} {0} stale"


def test_repeated_tokens_are_all_replaced() -> None:
    rendered = render_alert("{now}|{now}", now=0, seen=0)

    assert rendered == f"{format_timestamp(0)}|{format_timestamp(0)}"


def test_custom_time_format() -> None:
    assert format_timestamp(0, "%%") == "%"
    assert len(format_timestamp(0, "%Y")) == 4


def test_default_rendering_keeps_milliseconds() -> None:
    assert format_timestamp(1_234).split(".")[1][:3] == "234"

from __future__ import annotations

import pytest

from fontsmith.fonts.stylesheets import StyleQueue, StylesheetQueue


def test_style_queue_satisfies_protocol() -> None:
    assert isinstance(StyleQueue(), StylesheetQueue)


def test_register_does_not_overwrite_existing_handle() -> None:
    queue = StyleQueue()

    assert queue.register("theme", "/theme.css") is True
    assert queue.register("theme", "/other.css") is False
    assert queue.registered["theme"].src == "/theme.css"


def test_enqueue_requires_registration() -> None:
    queue = StyleQueue()

    assert queue.enqueue("missing") is False
    queue.register("theme", "/theme.css")
    assert queue.enqueue("theme") is True
    assert queue.enqueue("theme") is True
    assert queue.queue == ["theme"]


def test_render_outputs_dependencies_first_and_marks_done() -> None:
    queue = StyleQueue()
    queue.register("base", "/base.css", version="1.2")
    queue.register("theme", "/theme.css?x=1", deps=["base"], version="3", media="screen")
    queue.enqueue("theme")

    html = queue.render()

    assert html.splitlines() == [
        '<link rel="stylesheet" id="base-css" href="/base.css?ver=1.2" media="all">',
        '<link rel="stylesheet" id="theme-css" href="/theme.css?x=1&amp;ver=3" media="screen">',
    ]
    assert queue.is_("base", "done")
    assert queue.is_("theme", "done")
    assert queue.render() == ""


def test_inline_only_handle_renders_style_tag() -> None:
    queue = StyleQueue()
    queue.register("webfonts")

    assert queue.add_inline("webfonts", "@font-face{font-family:Inter;}") is True
    assert queue.add_inline("missing", "body{}") is False
    queue.enqueue("webfonts")

    assert queue.render() == (
        '<style id="webfonts-inline-css">\n@font-face{font-family:Inter;}\n</style>'
    )


def test_is_reports_each_list() -> None:
    queue = StyleQueue()
    queue.register("webfonts", "/fonts.css")

    assert queue.is_("webfonts", "registered")
    assert not queue.is_("webfonts")
    queue.enqueue("webfonts")
    assert queue.is_("webfonts", "enqueued")
    assert queue.is_("webfonts", "queue")
    assert queue.is_("webfonts", "to_do")
    assert not queue.is_("webfonts", "done")

    with pytest.raises(ValueError):
        queue.is_("webfonts", "pending")


def test_dequeue_and_deregister() -> None:
    queue = StyleQueue()
    queue.register("webfonts", "/fonts.css")
    queue.enqueue("webfonts")

    queue.dequeue("webfonts")
    assert not queue.is_("webfonts")
    assert queue.is_("webfonts", "registered")

    queue.enqueue("webfonts")
    queue.deregister("webfonts")
    assert not queue.is_("webfonts", "registered")
    assert not queue.is_("webfonts")

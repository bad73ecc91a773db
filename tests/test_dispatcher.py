from cf_pdf_purge.dispatcher import HookDispatcher


def test_actions_called_in_order():
    calls = []
    dispatcher = HookDispatcher()
    dispatcher.add_action("saved", lambda *args: calls.append(("a", args)))
    dispatcher.add_action("saved", lambda *args: calls.append(("b", args)))

    dispatcher.do_action("saved", 1, "x")

    assert calls == [("a", (1, "x")), ("b", (1, "x"))]


def test_unknown_hook_is_noop():
    dispatcher = HookDispatcher()
    dispatcher.do_action("missing", 1)
    assert dispatcher.apply_filters("missing", "value", 1) == "value"


def test_filters_chain():
    dispatcher = HookDispatcher()
    dispatcher.add_filter("title", lambda value, post_id: f"{value}!")
    dispatcher.add_filter("title", lambda value, post_id: f"{value}#{post_id}")

    assert dispatcher.apply_filters("title", "hello", 7) == "hello!#7"

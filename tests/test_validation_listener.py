import threading

import pytest

from gobe.reference import new_reference
from gobe.validation import ValidationResult
from gobe.validation_listener import FilterType, ListenerType, ValidationListener


def _join(threads):
    for thread in threads:
        thread.join(timeout=5)


def test_trigger_calls_registered_listener():
    vl = ValidationListener()
    ref = new_reference("on-save")
    seen = []
    lock = threading.Lock()

    def handler(result):
        with lock:
            seen.append(result)

    vl.register_listener(ref, handler)
    result = ValidationResult(True, "ok")
    threads = vl.trigger("on-save", result)
    _join(threads)
    assert len(threads) == 1
    assert seen == [result]


def test_trigger_unknown_event_dispatches_nothing():
    vl = ValidationListener()
    vl.register_listener(new_reference("a"), lambda r: None)
    assert vl.trigger("b", ValidationResult(True)) == []


def test_filter_blocks_dispatch():
    vl = ValidationListener()
    seen = []
    vl.register_listener(new_reference("evt"), seen.append)
    vl.add_filter(FilterType.RESULT, lambda r: r.is_valid)
    assert vl.trigger("evt", ValidationResult(False, "bad")) == []
    _join(vl.trigger("evt", ValidationResult(True, "good")))
    assert [r.message for r in seen] == ["good"]


def test_trigger_errors():
    vl = ValidationListener()
    with pytest.raises(ValueError):
        vl.trigger("", ValidationResult(True))
    with pytest.raises(ValueError):
        vl.trigger("evt", None)


def test_filters_add_remove():
    vl = ValidationListener()
    fn = lambda r: True  # noqa: E731
    vl.add_filter("event", fn)
    assert vl.get_filters() == {"event": fn}
    vl.remove_filter(FilterType.EVENT)
    assert vl.get_filters() == {}
    with pytest.raises(ValueError):
        vl.add_filter(FilterType.EVENT, None)


def test_handlers_add_remove():
    vl = ValidationListener()

    def h1(r):
        pass

    def h2(r):
        pass

    vl.add_handler(h1)
    vl.add_handler(h2)
    assert vl.get_handlers() == [h1, h2]
    vl.remove_handler(h1)
    assert vl.get_handlers() == [h2]
    copy = vl.get_handlers()
    copy.clear()
    assert vl.get_handlers() == [h2]


def test_listeners_add_remove():
    vl = ValidationListener()
    ref = new_reference("checker")

    def before(r):
        pass

    def after(r):
        pass

    vl.add_listener(ref, ListenerType.BEFORE, before)
    vl.add_listener(ref, "after", after)
    assert vl.get_listeners_by_name("checker") == {
        ListenerType.BEFORE: before,
        ListenerType.AFTER: after,
    }
    vl.remove_listener(ref, ListenerType.BEFORE)
    assert vl.get_listeners()[ref] == {ListenerType.AFTER: after}
    vl.remove_listener(ref, ListenerType.AFTER)
    assert vl.get_listeners() == {}
    assert vl.get_listeners_by_name("checker") is None


def test_listeners_keys():
    vl = ValidationListener()
    ref = new_reference("named")
    vl.register_listener(ref, lambda r: None)
    assert vl.get_listeners_keys() == {"named": ref}
    assert list(vl.get_listeners()[ref]) == [ListenerType.DEFAULT]


def test_register_listener_none_raises():
    vl = ValidationListener()
    with pytest.raises(ValueError):
        vl.register_listener(new_reference("x"), None)
    assert vl.get_listeners() == {}
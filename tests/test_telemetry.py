from gobe.telemetry import Telemetry


def test_defaults():
    t = Telemetry()
    assert (t.id, t.name, t.type) == ("default", "default", "default")
    assert t.metrics == {}


def test_update_merges():
    t = Telemetry()
    t.update_metrics({"cpu": 1.5})
    t.update_metrics({"mem": 2.0, "cpu": 3.0})
    assert t.metrics == {"cpu": 3.0, "mem": 2.0}


def test_update_advances_timestamp():
    t = Telemetry()
    before = t.last_updated
    t.update_metrics({"x": 1.0})
    assert t.last_updated >= before


def test_reset_clears():
    t = Telemetry()
    t.update_metrics({"x": 1.0})
    stamp = t.last_updated
    t.reset_metrics()
    assert t.metrics == {}
    assert t.last_updated >= stamp


def test_metrics_is_a_copy():
    t = Telemetry()
    t.update_metrics({"x": 1.0})
    snapshot = t.metrics
    snapshot["y"] = 2.0
    assert t.metrics == {"x": 1.0}
from hublab.app.core.metrics import Counter, MetricsRegistry


def test_counter_value_per_label_set():
    c = Counter("demo_total", "Demo")
    c.inc({"platform": "ios"})
    c.inc({"platform": "ios"}, by=2)
    assert c.value({"platform": "ios"}) == 3
    assert c.value({"platform": "web"}) == 0.0


def test_label_values_are_escaped():
    reg = MetricsRegistry()
    c = reg.counter("demo_total", "Demo")
    c.inc({"target": 'x"} 1\nfake_metric{a="b'})
    c.inc({"target": "back\\slash"})
    text = reg.render_prometheus()
    assert not any(line.startswith("fake_metric") for line in text.splitlines())
    assert 'demo_total{target="x\\"} 1\\nfake_metric{a=\\"b"} 1.0' in text
    assert 'demo_total{target="back\\\\slash"} 1.0' in text

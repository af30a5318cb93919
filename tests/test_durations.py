from yoga_therapy.durations import effective_duration, estimated_minutes, format_time


def test_authored_duration_wins():
    assert effective_duration([45, 90], 1, 300) == 90


def test_catalog_duration_when_not_authored():
    assert effective_duration([45], 1, 300) == 300
    assert effective_duration([45, None], 1, 300) == 300
    assert effective_duration(None, 0, 300) == 300


def test_zero_authored_duration_falls_through():
    assert effective_duration([0], 0, 180) == 180


def test_fallback_when_neither_is_known():
    assert effective_duration([], 0, None) == 120
    assert effective_duration([None], 0, 0) == 120
    assert effective_duration([], 0, None, fallback=30) == 30


def test_estimated_minutes_rounds_up():
    assert estimated_minutes([60, 60, 90, 90, 120, 120]) == 9
    assert estimated_minutes([61]) == 2
    assert estimated_minutes([]) == 0


def test_format_time():
    assert format_time(125) == "2:05"
    assert format_time(0) == "0:00"
    assert format_time(-3) == "0:00"

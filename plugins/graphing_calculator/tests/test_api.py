from app import create_app

BASE = "/api/graphing_calculator"


def _client(**settings):
    app = create_app("TestingConfig")
    if settings:
        app.config["PLUGIN_SETTINGS"]["graphing_calculator"] = settings
    return app.test_client()


def _start(client, *expressions, angle_unit="radian"):
    return client.post(
        f"{BASE}/session",
        json={"expressions": list(expressions), "angle_unit": angle_unit},
    )


def test_session_reports_each_expression():
    client = _client()
    resp = _start(client, "x^2", "2 2", "1/x")
    assert resp.status_code == 200
    payload = resp.get_json()["data"]
    assert [item["ok"] for item in payload["results"]] == [True, False, True]
    assert "Unexpected input" in payload["results"][1]["error"]
    assert payload["compiled"] == 2
    assert payload["angle_unit"] == "radian"


def test_samples_requires_session():
    client = _client()
    resp = client.post(f"{BASE}/samples", json={"x_start": -1, "x_end": 1})
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "graphing.no_session"


def test_samples_then_cache_hit():
    client = _client()
    _start(client, "x^2", "1/x")
    resp = client.post(f"{BASE}/samples", json={"x_start": -1, "x_end": 1})
    assert resp.status_code == 200
    payload = resp.get_json()["data"]
    assert payload["step"] == 1 / 1024
    square, reciprocal = payload["series"]
    assert square["expression"] == "x^2"
    assert square["cached"] is False
    assert square["samples"][0] == [-1.0, 1.0]
    assert len(square["samples"]) == 2 * 1024 + 1
    assert [0.0, None] in reciprocal["samples"]

    again = client.post(f"{BASE}/samples", json={"x_start": -0.5, "x_end": 0.5}).get_json()["data"]
    assert all(item["cached"] for item in again["series"])


def test_samples_validation():
    client = _client()
    _start(client, "x")
    resp = client.post(f"{BASE}/samples", json={"x_start": 1, "x_end": 1})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "graphing.invalid_range"

    resp = client.post(f"{BASE}/samples", json={"x_start": -500, "x_end": 500})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "graphing.invalid_range"

    resp = client.post(f"{BASE}/samples", json={"x_start": 0})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "graphing.invalid_request"


def test_expand_grows_caches():
    client = _client()
    _start(client, "sin(x)")
    client.post(f"{BASE}/samples", json={"x_start": -1, "x_end": 1})
    resp = client.post(f"{BASE}/expand")
    assert resp.status_code == 200
    payload = resp.get_json()["data"]
    assert payload["cache_sizes"] == [2 * 1024 + 1 + 2 * 1024]
    series = client.post(f"{BASE}/samples", json={"x_start": -2, "x_end": 2}).get_json()["data"]["series"]
    assert series[0]["cached"] is True


def test_mode_switch_invalidates_samples():
    client = _client()
    _start(client, "sin(x)")
    client.post(f"{BASE}/samples", json={"x_start": 80, "x_end": 100})
    resp = client.post(f"{BASE}/mode", json={"angle_unit": "degree"})
    assert resp.get_json()["data"] == {"angle_unit": "degree", "changed": True}
    payload = client.post(f"{BASE}/samples", json={"x_start": 80, "x_end": 100}).get_json()["data"]
    assert payload["angle_unit"] == "degree"
    assert payload["series"][0]["cached"] is False

    resp = client.post(f"{BASE}/mode", json={"angle_unit": "gradian"})
    assert resp.status_code == 400


def test_reset_session():
    client = _client()
    _start(client, "x")
    resp = client.delete(f"{BASE}/session")
    assert resp.status_code == 200
    resp = client.post(f"{BASE}/samples", json={"x_start": -1, "x_end": 1})
    assert resp.status_code == 409


def test_plugin_settings_limit_expressions():
    client = _client(max_expressions=1)
    resp = _start(client, "x", "x^2")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "graphing.too_many_expressions"


def test_evaluate_endpoint():
    client = _client()
    resp = client.post(f"{BASE}/evaluate", json={"expression": "2*sin(x)/e", "x": 0})
    assert resp.status_code == 200
    payload = resp.get_json()["data"]
    assert payload["result"] == 0.0
    assert payload["defined"] is True
    assert payload["instructions"] == ["push 2", "push x", "call sin", "mul", "push 2.71828182846", "div"]


def test_evaluate_undefined_and_invalid():
    client = _client()
    payload = client.post(f"{BASE}/evaluate", json={"expression": "log(x)", "x": 0}).get_json()["data"]
    assert payload["result"] is None
    assert payload["defined"] is False

    resp = client.post(f"{BASE}/evaluate", json={"expression": "sin(x", "x": 0})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "graphing.invalid_expression"


def test_session_survives_overly_nested_expression():
    client = _client()
    resp = _start(client, "x", "(" * 200 + "x" + ")" * 200)
    assert resp.status_code == 200
    payload = resp.get_json()["data"]
    assert [item["ok"] for item in payload["results"]] == [True, False]
    assert payload["compiled"] == 1


def test_rejected_session_keeps_previous_mode():
    client = _client(max_expressions=1)
    _start(client, "sin(x)", angle_unit="degree")
    resp = _start(client, "x", "x^2", angle_unit="radian")
    assert resp.status_code == 400
    resp = client.post(f"{BASE}/mode", json={"angle_unit": "degree"})
    assert resp.get_json()["data"]["changed"] is False


def test_evaluate_nan_and_overflow_are_undefined():
    client = _client()
    payload = client.post(f"{BASE}/evaluate", json={"expression": "10^x - 10^x", "x": 400}).get_json()["data"]
    assert payload["result"] is None
    assert payload["defined"] is False

    payload = client.post(f"{BASE}/evaluate", json={"expression": "10^x", "x": 400}).get_json()["data"]
    assert payload["result"] is None
    assert payload["defined"] is False

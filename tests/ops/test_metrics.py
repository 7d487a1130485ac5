from prometheus_client.parser import text_string_to_metric_families

from app.village_nav.core.metrics import Metrics


def _sample_value(body: str, name: str, labels: dict[str, str]) -> float | None:
    for family in text_string_to_metric_families(body):
        for sample in family.samples:
            if sample.name == name and sample.labels == labels:
                return sample.value
    return None


def test_metrics_endpoint_exposes_navigation_counters(client, auth_headers):
    client.get("/vms/navigation/route-access", params={"path": "/fees"}, headers=auth_headers("admin_officer"))
    client.get("/vms/navigation", headers=auth_headers("janitor", []))

    response = client.get("/vms/ops/metrics")
    assert response.status_code == 200
    body = response.text
    assert _sample_value(body, "navigation_access_total", {"resource_type": "route", "decision": "granted"}) >= 1
    assert _sample_value(body, "navigation_errors_total", {"type": "invalid_role"}) >= 1
    assert "http_requests_total" in body


def test_metrics_record_cache_lookups():
    metrics = Metrics(enabled=True)
    metrics.record_cache_lookup(cache="items", hit=True)
    metrics.record_cache_lookup(cache="items", hit=False)
    metrics.record_cache_lookup(cache="items", hit=False)
    body = metrics.render().content.decode()
    assert _sample_value(body, "navigation_cache_lookups_total", {"cache": "items", "result": "hit"}) == 1.0
    assert _sample_value(body, "navigation_cache_lookups_total", {"cache": "items", "result": "miss"}) == 2.0

    metrics.reset()
    body = metrics.render().content.decode()
    assert _sample_value(body, "navigation_cache_lookups_total", {"cache": "items", "result": "miss"}) is None


def test_access_decision_labels_do_not_depend_on_order():
    metrics = Metrics(enabled=True)
    metrics.record_access_decision(resource_type="route", allowed=False)
    body = metrics.render().content.decode()
    assert _sample_value(body, "navigation_access_total", {"decision": "denied", "resource_type": "route"}) == 1.0


def test_disabled_metrics_render_placeholder():
    metrics = Metrics(enabled=False)
    metrics.record_access_decision(resource_type="route", allowed=True)
    snapshot = metrics.render()
    assert snapshot.content == b"metrics_disabled\n"
    assert snapshot.content_type == "text/plain"

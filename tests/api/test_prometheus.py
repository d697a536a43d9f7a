def test_prometheus_metrics(api_client):
    api_client.get("/health")

    response = api_client.get("/metrics/")
    assert response.status_code == 200
    assert "tugasku_http_requests_total" in response.text
    assert 'route="/health"' in response.text
    assert "reminders_sent_total" in response.text

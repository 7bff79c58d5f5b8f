from __future__ import annotations

from fastapi.testclient import TestClient

from tests.fakes import FakeSmartPlugSource


def test_ui_index_redirects(client: TestClient) -> None:
    resp = client.get("/ui/", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/ui/dashboard"


def test_dashboard_page_renders_cards_chart_and_table(client: TestClient) -> None:
    resp = client.get("/ui/dashboard", params={"width": 1300})
    assert resp.status_code == 200
    html = resp.text
    assert "Total: 600.00 Wh" in html
    assert 'id="chart-config"' in html
    assert "Duration (Seconds)" in html
    assert "Switch to kWh" in html


def test_dashboard_page_narrow_hides_columns(client: TestClient) -> None:
    html = client.get("/ui/dashboard", params={"width": 500}).text
    assert 'data-field="wh"' in html
    assert 'data-field="avgWatts"' not in html


def test_form_submission_changes_params(
    client: TestClient, source: FakeSmartPlugSource
) -> None:
    resp = client.get(
        "/ui/dashboard",
        params={"startDate": "2024-05-01", "endDate": "2024-05-01", "dataType": "deviceData"},
    )
    assert resp.status_code == 200
    assert "Device Data" in resp.text
    assert "Oslo" in resp.text
    assert source.calls[-1].data_type == "deviceData"


def test_form_with_inverted_dates_shows_error(
    client: TestClient, source: FakeSmartPlugSource
) -> None:
    resp = client.get(
        "/ui/dashboard", params={"startDate": "2024-05-09", "endDate": "2024-05-01"}
    )
    assert resp.status_code == 200
    assert "Start date must not be after end date." in resp.text
    assert len(source.calls) == 1


def test_unit_link_switches_unit(client: TestClient) -> None:
    html = client.get("/ui/dashboard", params={"unit": "kWh"}).text
    assert "Total: 0.60 kWh" in html
    assert "Switch to Wh" in html

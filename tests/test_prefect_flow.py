import json

import pytest
from prefect.testing.utilities import prefect_test_harness

import ml.prefect_flow as prefect_flow
from ml.errors import LoadError, MalformedRowError
from ml.prefect_flow import book_sales_pipeline

SAMPLE_CSV = (
    "book,review,state,price\n"
    "A,Excellent,TX,10\n"
    "A,,NY,10\n"
    "A,Poor,FL,20\n"
    "B,Great,Ohio,50\n"
)


@pytest.fixture(scope="module", autouse=True)
def prefect_backend():
    with prefect_test_harness():
        yield


@pytest.fixture
def sent(monkeypatch):
    """Record Apprise pushes instead of sending them."""
    calls = []

    def fake_send(status, message, url):
        calls.append((status, message, url))
        return True

    monkeypatch.setenv("APPRISE_URL", "json://localhost/hook")
    monkeypatch.setattr(prefect_flow, "send_run_report", fake_send)
    return calls


def test_flow_writes_summary(write_csv, tmp_path):
    csv_path = write_csv(SAMPLE_CSV)
    summary_path = tmp_path / "reports" / "summary.json"

    out = book_sales_pipeline(str(csv_path), str(summary_path))

    assert out == summary_path
    data = json.loads(summary_path.read_text(encoding="utf-8"))
    assert data["rows_loaded"] == 4
    assert data["rows_dropped"] == 1
    assert data["rows_analysed"] == 3
    assert data["unmapped_states"] == {"Ohio": 1}
    assert data["revenue_by_book"][0] == {"book": "B", "revenue": 50.0}


def test_flow_notifies_success(write_csv, tmp_path, sent):
    book_sales_pipeline(str(write_csv(SAMPLE_CSV)), str(tmp_path / "summary.json"))

    assert [status for status, _, _ in sent] == ["SUCCESS"]
    assert "3 rows" in sent[0][1]


def test_flow_reraises_malformed_row(write_csv, tmp_path, sent):
    csv_path = write_csv("book,review,state,price\nA,Good\n")
    summary_path = tmp_path / "summary.json"

    with pytest.raises(MalformedRowError) as exc:
        book_sales_pipeline(str(csv_path), str(summary_path))

    assert exc.value.row_index == 0
    assert exc.value.found == 2
    assert not summary_path.exists()
    assert [status for status, _, _ in sent] == ["FAILED"]
    assert "row 0" in sent[0][1]


def test_flow_reraises_missing_file(tmp_path):
    with pytest.raises(LoadError):
        book_sales_pipeline(str(tmp_path / "missing.csv"), str(tmp_path / "summary.json"))


def test_failed_push_does_not_fail_run(write_csv, tmp_path, monkeypatch):
    def broken_send(status, message, url):
        raise RuntimeError("network down")

    monkeypatch.setenv("APPRISE_URL", "json://localhost/hook")
    monkeypatch.setattr(prefect_flow, "send_run_report", broken_send)

    out = book_sales_pipeline(str(write_csv(SAMPLE_CSV)), str(tmp_path / "summary.json"))
    assert out.exists()

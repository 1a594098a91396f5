"""Integration tests for Reports API endpoints."""

import csv
import io
import logging
import re
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from bindash.api.main import app
from bindash.db.models import ReportRecord
from bindash.db.repos.report_repo import ReportRepo
from bindash.domain.models.report import NewReport

from conftest import ADMIN_HEADERS, override_dependencies, seed_bins_and_collections


@pytest.fixture()
async def report_client(session, engine, storage, admin):
    override_dependencies(app, session, engine, storage, admin.id)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def _create(client, **form):
    data = {"name": "Monthly", "type": "collections", "format": "csv"}
    data.update(form)
    return await client.post("/api/reports", data=data, headers=ADMIN_HEADERS)


async def _stored(session, status="generating", file_path=None) -> int:
    repo = ReportRepo(session)
    report_id = await repo.insert_generating(NewReport(name="Stored", report_type="status", format="csv"))
    if status == "completed":
        await repo.mark_completed(report_id, file_path)
    await session.commit()
    return report_id


class TestCreateReport:
    async def test_create_completes(self, report_client, storage, admin):
        resp = await _create(report_client)
        assert resp.status_code == 200
        body = resp.json()

        assert body["success"] is True
        report = body["report"]
        assert report["status"] == "completed"
        assert re.fullmatch(r"generated/reports/report_\d+\.csv", report["file_path"])
        assert report["file_path"] == f"generated/reports/report_{report['report_id']}.csv"
        assert report["raw"]["generated_by"] == admin.id

        rows = list(csv.reader(io.StringIO((storage.root / report["file_path"]).read_text())))
        assert len(rows) == 2
        assert rows[1][0] == str(report["report_id"])
        assert rows[1][1] == "Monthly"

    async def test_empty_name_inserts_nothing(self, report_client, session, storage):
        resp = await _create(report_client, name="")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Report name and type are required."
        assert body["report"] is None

        assert await ReportRepo(session).count() == 0
        assert not storage.reports_dir.exists()

    async def test_missing_type(self, report_client):
        resp = await report_client.post("/api/reports", data={"name": "Monthly"}, headers=ADMIN_HEADERS)
        assert resp.json()["success"] is False

    async def test_description_and_dates(self, report_client):
        resp = await _create(report_client, description="North route", from_date="2026-10-01", to_date="2026-10-31")
        report = resp.json()["report"]
        assert report["description"] == "North route"
        assert report["raw"]["date_from"] == "2026-10-01"
        assert report["raw"]["date_to"] == "2026-10-31"

    async def test_bad_date(self, report_client, session):
        resp = await _create(report_client, from_date="31/10/2026")
        body = resp.json()
        assert body["success"] is False
        assert "from_date" in body["message"]
        assert await ReportRepo(session).count() == 0

    async def test_unknown_format_becomes_pdf(self, report_client):
        report = (await _create(report_client, format="docx")).json()["report"]
        assert report["format"] == "pdf"
        assert report["file_path"].endswith(".pdf")

    async def test_write_failure_reported(self, report_client, storage):
        (storage.root / "generated").write_text("in the way")
        body = (await _create(report_client)).json()
        assert body["success"] is False
        assert body["report"]["status"] == "failed"
        assert body["report"]["file_path"] is None

    async def test_requires_admin(self, report_client, session):
        resp = await report_client.post("/api/reports", data={"name": "Monthly", "type": "collections"})
        assert resp.status_code == 403
        assert await ReportRepo(session).count() == 0


class TestListReports:
    async def test_newest_first(self, report_client):
        first = (await _create(report_client, name="First")).json()["report"]["report_id"]
        second = (await _create(report_client, name="Second")).json()["report"]["report_id"]

        resp = await report_client.get("/api/reports", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert [r["report_id"] for r in resp.json()] == [second, first]

    async def test_listing_is_repeatable(self, report_client):
        for i in range(3):
            await _create(report_client, name=f"R{i}")
        a = (await report_client.get("/api/reports", headers=ADMIN_HEADERS)).json()
        b = (await report_client.get("/api/reports", headers=ADMIN_HEADERS)).json()
        assert a == b

    async def test_limit_bounds(self, report_client):
        resp = await report_client.get("/api/reports", params={"limit": 0}, headers=ADMIN_HEADERS)
        assert resp.status_code == 422

    async def test_requires_admin(self, report_client):
        assert (await report_client.get("/api/reports")).status_code == 403

    async def test_mistyped_report_data(self, report_client, session):
        session.add(ReportRecord(name="Odd", report_type="status", format="pdf",
                                 report_data='{"description": ["a", "b"]}'))
        await session.commit()

        resp = await report_client.get("/api/reports", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert resp.json()[0]["description"] is None


class TestGetReport:
    async def test_detail(self, report_client):
        report_id = (await _create(report_client)).json()["report"]["report_id"]
        resp = await report_client.get(f"/api/reports/{report_id}", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert resp.json()["name"] == "Monthly"

    async def test_missing(self, report_client):
        assert (await report_client.get("/api/reports/999", headers=ADMIN_HEADERS)).status_code == 404

    async def test_bad_id(self, report_client):
        assert (await report_client.get("/api/reports/abc", headers=ADMIN_HEADERS)).status_code == 400


class TestDownloadReport:
    async def test_download_bytes(self, report_client, storage):
        report = (await _create(report_client)).json()["report"]
        expected = (storage.root / report["file_path"]).read_bytes()

        resp = await report_client.get(f"/api/reports/{report['report_id']}/download", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert resp.content == expected
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == f'attachment; filename="report_{report["report_id"]}.csv"'
        assert resp.headers["content-length"] == str(len(expected))
        assert "no-cache" in resp.headers["cache-control"]

    async def test_text_pdf_placeholder_served_as_text(self, report_client):
        report = (await _create(report_client, format="pdf")).json()["report"]
        assert report["file_path"].endswith(".pdf")

        resp = await report_client.get(f"/api/reports/{report['report_id']}/download", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")

    async def test_generating_is_forbidden(self, report_client, session):
        report_id = await _stored(session)
        resp = await report_client.get(f"/api/reports/{report_id}/download", headers=ADMIN_HEADERS)
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Report not ready for download"}

    async def test_zero_id(self, report_client):
        resp = await report_client.get("/api/reports/0/download", headers=ADMIN_HEADERS)
        assert resp.status_code == 400

    async def test_traversal_path(self, report_client, session, caplog):
        report_id = await _stored(session, status="completed", file_path="../../etc/passwd")

        with caplog.at_level(logging.WARNING):
            resp = await report_client.get(f"/api/reports/{report_id}/download", headers=ADMIN_HEADERS)
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Invalid file path"}
        assert "root:" not in resp.text
        assert "../../etc/passwd" in caplog.text

    async def test_missing_record(self, report_client):
        resp = await report_client.get("/api/reports/4242/download", headers=ADMIN_HEADERS)
        assert resp.status_code == 404

    async def test_non_admin(self, report_client):
        report = (await _create(report_client)).json()["report"]
        resp = await report_client.get(f"/api/reports/{report['report_id']}/download")
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Forbidden"}

    async def test_wrong_key(self, report_client):
        report = (await _create(report_client)).json()["report"]
        resp = await report_client.get(
            f"/api/reports/{report['report_id']}/download", headers={"X-Admin-Key": "guess"}
        )
        assert resp.status_code == 403


class TestExportCollections:
    async def test_get_export(self, report_client, session):
        await seed_bins_and_collections(session, datetime(2026, 10, 12, 9, 0))
        resp = await report_client.get(
            "/api/reports/export",
            params={"from_date": "2026-10-01", "to_date": "2026-10-31"},
            headers=ADMIN_HEADERS,
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == 'attachment; filename="collections_2026-10-01_2026-10-31.csv"'

        rows = list(csv.reader(io.StringIO(resp.text)))
        assert rows[0][0] == "Collection ID"
        assert len(rows) == 4
        assert rows[1][2] == "B-001"
        assert rows[1][8] == "lid broken"

    async def test_post_export(self, report_client, session):
        await seed_bins_and_collections(session, datetime(2026, 10, 12, 9, 0))
        resp = await report_client.post(
            "/api/reports/export",
            data={"type": "collections", "from_date": "2026-11-01"},
            headers=ADMIN_HEADERS,
        )
        assert resp.status_code == 200
        assert len(resp.text.splitlines()) == 1

    async def test_reversed_range(self, report_client):
        resp = await report_client.get(
            "/api/reports/export",
            params={"from_date": "2026-10-31", "to_date": "2026-10-01"},
            headers=ADMIN_HEADERS,
        )
        assert resp.status_code == 400

    async def test_bad_date(self, report_client):
        resp = await report_client.get("/api/reports/export", params={"to_date": "soon"}, headers=ADMIN_HEADERS)
        assert resp.status_code == 400

    async def test_requires_admin(self, report_client):
        assert (await report_client.get("/api/reports/export")).status_code == 403

"""Tests for the HTTP API."""

from httpx import AsyncClient

from payroll_ledger.models import TimekeepingEntry
from payroll_ledger.services.report_service import PayrollReportService, render_report
from tests.conftest import FIXTURES_DIR, HEADER, SCENARIO_CSV, SCENARIO_REPORT, count_rows

CSV_TYPE = "text/csv"


def csv_file(filename: str, content: str | bytes) -> dict:
    return {"file": (filename, content, CSV_TYPE)}


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "healthy"
        assert "timestamp" in body

    async def test_ready(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    async def test_live(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json() == {"status": "alive"}


class TestUploadEndpoint:
    """Test POST /upload."""

    async def test_upload_then_report(self, client: AsyncClient):
        """Reference upload is stored and reported."""
        response = await client.post("/upload", files=csv_file("time-report-4.csv", SCENARIO_CSV))

        assert response.status_code == 201
        assert response.json() == {
            "message": "File uploaded and data stored successfully",
            "reportId": "4",
            "filename": "time-report-4.csv",
            "entriesCreated": 4,
        }

        report = await client.get("/report")
        assert report.status_code == 200
        assert report.json() == SCENARIO_REPORT

    async def test_duplicate_upload(self, client: AsyncClient, session_factory):
        await client.post("/upload", files=csv_file("time-report-4.csv", SCENARIO_CSV))

        response = await client.post("/upload", files=csv_file("time-report-4.csv", SCENARIO_CSV))

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "DUPLICATE_REPORT"
        assert body["detail"] == "Report ID 4 already exists"
        assert await count_rows(session_factory) == (1, 4)

    async def test_no_file(self, client: AsyncClient):
        response = await client.post("/upload")

        assert response.status_code == 400
        assert response.json()["code"] == "NO_FILE_PROVIDED"
        assert response.json()["detail"] == "No file uploaded"

    async def test_not_a_csv(self, client: AsyncClient):
        response = await client.post(
            "/upload", files={"file": ("time-report-4.txt", SCENARIO_CSV, "text/plain")}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_FILE_TYPE"
        assert response.json()["detail"] == "Only CSV files are allowed"

    async def test_bad_filename(self, client: AsyncClient):
        response = await client.post("/upload", files=csv_file("hours.csv", SCENARIO_CSV))

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILENAME_FORMAT"

    async def test_empty_file(self, client: AsyncClient):
        response = await client.post("/upload", files=csv_file("time-report-5.csv", HEADER + "\n"))

        assert response.status_code == 400
        assert response.json()["code"] == "EMPTY_FILE"
        assert response.json()["detail"] == "Invalid CSV format: File Empty"

    async def test_missing_headers(self, client: AsyncClient, session_factory):
        response = await client.post(
            "/upload",
            files=csv_file("time-report-6.csv", "date,hours worked,employee id\n01/01/2023,1,1\n"),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "MISSING_HEADERS"
        assert body["context"] == {"missing_headers": ["job group"]}
        assert await count_rows(session_factory) == (0, 0)

    async def test_malformed_row_reports_location(self, client: AsyncClient):
        response = await client.post(
            "/upload",
            files=csv_file("time-report-7.csv", f"{HEADER}\n01/01/2023,8,,A\n"),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "MALFORMED_ROW"
        assert body["context"] == {"line": 2, "column": "employee id"}

    async def test_employee_id_beyond_column_range(self, client: AsyncClient, session_factory):
        """An id the integer column cannot hold is a caller error, not a server error."""
        response = await client.post(
            "/upload",
            files=csv_file(
                "time-report-77.csv", f"{HEADER}\n01/01/2023,8,99999999999999999999,A\n"
            ),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "MALFORMED_ROW"
        assert body["context"] == {"line": 2, "column": "employee id"}
        assert await count_rows(session_factory) == (0, 0)

    async def test_job_group_longer_once_upper_cased(self, client: AsyncClient):
        response = await client.post(
            "/upload",
            files=csv_file("time-report-78.csv", f"{HEADER}\n01/01/2023,8,1,ß\n".encode()),
        )

        assert response.status_code == 400
        assert response.json()["context"] == {"line": 2, "column": "job group"}

    async def test_file_too_large(self, client: AsyncClient, session_factory):
        big = HEADER + "\n" + "01/01/2023,8,1,A\n" * 2000

        response = await client.post("/upload", files=csv_file("time-report-8.csv", big))

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"
        assert await count_rows(session_factory) == (0, 0)

    async def test_upload_directory_left_empty(self, client: AsyncClient, upload_dir):
        """Staged copies are removed after success and failure."""
        await client.post("/upload", files=csv_file("time-report-4.csv", SCENARIO_CSV))
        await client.post("/upload", files=csv_file("time-report-4.csv", SCENARIO_CSV))
        await client.post("/upload", files=csv_file("time-report-9.csv", "nonsense"))

        assert list(upload_dir.iterdir()) == []

    async def test_reference_file(self, client: AsyncClient):
        content = (FIXTURES_DIR / "time-report-42.csv").read_bytes()

        response = await client.post("/upload", files=csv_file("time-report-42.csv", content))

        assert response.status_code == 201
        assert response.json()["entriesCreated"] == 21

        report = (await client.get("/report")).json()["payrollReport"]["employeeReports"]
        assert len(report) == 12
        assert report[0] == {
            "employeeId": "1",
            "payPeriod": {"startDate": "2023-11-01", "endDate": "2023-11-15"},
            "amountPaid": "$225.00",
        }


class TestReportEndpoint:
    """Test GET /report."""

    async def test_empty_report(self, client: AsyncClient):
        response = await client.get("/report")

        assert response.status_code == 200
        assert response.json() == {"payrollReport": {"employeeReports": []}}

    async def test_job_group_without_rate(self, client: AsyncClient):
        """A stored group missing from the rate table fails the whole report."""
        await client.post("/upload", files=csv_file("time-report-4.csv", SCENARIO_CSV))
        await client.post(
            "/upload", files=csv_file("time-report-5.csv", f"{HEADER}\n03/01/2023,2,3,C\n")
        )

        response = await client.get("/report")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "RATE_NOT_CONFIGURED"
        assert body["context"] == {"job_group": "C"}
        assert "employeeReports" not in response.text

    async def test_matches_rendered_report(self, client: AsyncClient, session_factory, pay_rates):
        """The endpoint body is the rendered report document."""
        content = (FIXTURES_DIR / "time-report-42.csv").read_bytes()
        await client.post("/upload", files=csv_file("time-report-42.csv", content))

        async with session_factory() as session:
            lines = await PayrollReportService(session, pay_rates).generate()

        response = await client.get("/report")
        assert response.json() == render_report(lines)

    async def test_storage_failure_hides_details(self, client: AsyncClient, engine):
        async with engine.begin() as conn:
            await conn.run_sync(TimekeepingEntry.__table__.drop)

        response = await client.get("/report")

        assert response.status_code == 500
        body = response.json()
        assert body["detail"] == "Internal server error"
        assert body["code"] == "STORAGE_FAILURE"
        assert body["context"] is None

from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import int_arg, optional_arg
from ..container import Container
from ..core.constants import DEFAULT_REPORT_PAGE_SIZE
from ..core.enums import ReportType

_CSV_FIELDS = [
    "user_id",
    "full_name",
    "department",
    "designation",
    "present",
    "absent",
    "leaves",
    "missed_checkout",
    "overtime_minutes",
    "shortfall_minutes",
    "total_score",
]


def register(app: Flask, container: Container) -> None:
    def _month_year() -> tuple[int, int]:
        today = now_local().date()
        return int_arg("month", today.month), int_arg("year", today.year)

    def _write_report_csv(*, rows, filename: str):
        """Write compliance rows to a CSV download."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row.to_csv_row())

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/reports/compliance", methods=["GET"], endpoint="compliance_report")
    def compliance_report():
        month, year = _month_year()
        page = container.compliance_report_service.page(
            month=month,
            year=year,
            page=int_arg("page", 1),
            limit=int_arg("limit", DEFAULT_REPORT_PAGE_SIZE),
            report_type=request.args.get("type") or ReportType.VIOLATORS.value,
            department=optional_arg("department"),
        )
        return jsonify(page.to_dict())

    @app.route("/api/admin/reports/compliance.csv", methods=["GET"], endpoint="compliance_report_csv")
    def compliance_report_csv():
        month, year = _month_year()
        report_type = request.args.get("type") or ReportType.VIOLATORS.value
        rows = container.compliance_report_service.ranked(
            month=month,
            year=year,
            report_type=report_type,
            department=optional_arg("department"),
        )
        return _write_report_csv(rows=rows, filename=f"compliance_{report_type}_{year}_{month:02d}.csv")

    @app.route("/api/admin/reports/analytics", methods=["GET"], endpoint="analytics_report")
    def analytics_report():
        month, year = _month_year()
        return jsonify(container.analytics_report_service.build(month=month, year=year).to_dict())

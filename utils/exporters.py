"""
utils/exporters.py
-----------------
Download formats for a saved attendance day: CSV, Excel and PDF.
Each helper returns (BytesIO, mimetype, filename).
"""

import csv
import io

from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from utils.reporting import format_display_date, section_label

EXPORT_FORMATS = ("csv", "xlsx", "pdf")

ROW_HEADER = ["#", "Roll No", "Name", "Status"]


def _title(snapshot):
    label = section_label(snapshot.get("year"), snapshot.get("section"))
    title = f"Attendance Report - {format_display_date(snapshot.get('date'))}"
    return f"{title} ({label})" if label else title


def _count_rows(snapshot):
    return [
        ["Present", f"{snapshot.get('present_count', 0)}/{snapshot.get('total_students', 0)}"],
        ["Leave", snapshot.get("leave_count", 0)],
        ["On Duty", snapshot.get("od_count", 0)],
        ["Late", snapshot.get("late_count", 0)],
        ["Absent", snapshot.get("absent_count", 0)],
    ]


def _student_rows(snapshot):
    for i, record in enumerate(snapshot.get("student_records", []), start=1):
        yield [i, record.get("roll_no", ""), record.get("name", ""), record.get("status", "")]


def _filename(snapshot, extension):
    day = snapshot["date"].strftime("%Y-%m-%d")
    parts = ["attendance", day]
    if snapshot.get("year"):
        parts.append(snapshot["year"])
    if snapshot.get("section"):
        parts.append(snapshot["section"])
    return "_".join(parts) + "." + extension


def export_csv(snapshot):
    si = io.StringIO()
    cw = csv.writer(si)
    cw.writerow([_title(snapshot)])
    for row in _count_rows(snapshot):
        cw.writerow(row)
    cw.writerow([])
    cw.writerow(ROW_HEADER)
    for row in _student_rows(snapshot):
        cw.writerow(row)

    output = io.BytesIO()
    output.write(si.getvalue().encode("utf-8"))
    output.seek(0)
    return output, "text/csv", _filename(snapshot, "csv")


def export_excel(snapshot):
    wb = Workbook()
    ws = wb.active
    ws.title = "Attendance"
    ws.append([_title(snapshot)])
    ws["A1"].font = Font(bold=True)
    for row in _count_rows(snapshot):
        ws.append(row)
    ws.append([])
    ws.append(ROW_HEADER)
    for cell in ws[ws.max_row]:
        cell.font = Font(bold=True)
    for row in _student_rows(snapshot):
        ws.append(row)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return (output, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            _filename(snapshot, "xlsx"))


def export_pdf(snapshot):
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    y = height - 50
    c.setFont("Helvetica-Bold", 14)
    c.drawString(50, y, _title(snapshot))
    y -= 30
    c.setFont("Helvetica", 12)
    for label, value in _count_rows(snapshot):
        c.drawString(50, y, f"{label}: {value}")
        y -= 18
    y -= 12
    c.setFont("Helvetica-Bold", 12)
    for x, heading in zip((50, 90, 200, 450), ROW_HEADER):
        c.drawString(x, y, heading)
    y -= 20
    c.setFont("Helvetica", 11)

    for number, roll_no, name, status in _student_rows(snapshot):
        if y < 50:
            c.showPage()
            c.setFont("Helvetica", 11)
            y = height - 50
        c.drawString(50, y, str(number))
        c.drawString(90, y, str(roll_no))
        c.drawString(200, y, str(name)[:40])
        c.drawString(450, y, str(status))
        y -= 18

    c.save()
    buffer.seek(0)
    return buffer, "application/pdf", _filename(snapshot, "pdf")


EXPORTERS = {
    "csv": export_csv,
    "xlsx": export_excel,
    "pdf": export_pdf,
}

"""
Certificate renderer - Status banner, completion summary and preview.
"""

import html

from courseplayer.classroom import CertificateState, CertificateView


BANNER_COLORS = {
    CertificateState.APPROVED: ("#e8f5e9", "#2e7d32", "🏆"),
    CertificateState.REJECTED: ("#ffebee", "#c62828", "❌"),
    CertificateState.UNAVAILABLE: ("#ffebee", "#c62828", "⚠️"),
    CertificateState.PENDING: ("#fffde7", "#f9a825", "⏳"),
    CertificateState.NOT_ISSUED: ("#fffde7", "#f9a825", "⏳"),
}

SUMMARY_LABELS = [
    ("course_title", "Course"),
    ("instructor", "Instructor"),
    ("completion_date", "Completed"),
    ("overall_progress", "Progress"),
    ("final_score", "Final score"),
    ("template", "Certificate type"),
]


def render_certificate_banner(view: CertificateView) -> str:
    background, color, icon = BANNER_COLORS[view.state]
    return (
        f'<div style="background:{background};border-left:4px solid {color};'
        f'border-radius:8px;padding:1em 1.2em;margin:1em 0;">'
        f'<div style="font-size:1.3em;font-weight:700;color:{color};">{icon} {html.escape(view.title)}</div>'
        f'<div style="color:#444;margin-top:0.3em;">{html.escape(view.message)}</div>'
        f'</div>'
    )


def render_completion_summary(view: CertificateView) -> str:
    rows = []
    for key, label in SUMMARY_LABELS:
        if key not in view.summary:
            continue
        value = view.summary[key]
        if key == "overall_progress":
            value = f"{round(float(value))}%"
        rows.append(f"<tr><th style='text-align:left;padding-right:1em;'>{label}</th><td>{html.escape(str(value))}</td></tr>")
    return "<h3>Course Completion Summary</h3><table>" + "".join(rows) + "</table>"


def render_certificate_preview(view: CertificateView) -> str:
    """Certificate of completion card; empty unless approved."""
    if not view.show_preview or view.certificate is None:
        return ""
    cert = view.certificate
    issued = cert.issued_date.date().isoformat() if cert.issued_date else "N/A"
    return f"""
    <div style="border:3px double #b8860b;border-radius:12px;padding:2em;text-align:center;margin:1.5em 0;">
        <div style="font-size:1.8em;font-weight:700;">Certificate of Completion</div>
        <div style="font-size:1.4em;margin:0.8em 0;">{html.escape(cert.student_name or "Student Name")}</div>
        <div>has successfully completed the course</div>
        <div style="font-size:1.2em;font-weight:600;margin:0.5em 0;">{html.escape(str(view.summary.get("course_title", "")))}</div>
        <div style="display:flex;justify-content:space-around;margin-top:1.5em;color:#555;">
            <div>Issued: {issued}</div>
            <div>ID: {html.escape(cert.certificate_number or "N/A")}</div>
            <div>Instructor: {html.escape(str(view.summary.get("instructor", "")))}</div>
        </div>
    </div>
    """

import logging
import sys
from collections import Counter
from datetime import datetime, timedelta
import pytz
from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.platypus import Paragraph, Spacer, Table, TableStyle, PageBreak
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.platypus.frames import Frame
from reportlab.platypus.doctemplate import PageTemplate, BaseDocTemplate
import config
from collect import open_store
from leaderboard import build_leaderboard, group_by_user
from process import build_difficulty_index, score_with_index
from utils import parse_date, utc_day, utc_now

ACTIVITY_DAYS = 14

HEADER_STYLE = [
    ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.black),
    ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
    ('BACKGROUND', (0, 1), (-1, -1), colors.white),
    ('GRID', (0, 0), (-1, -1), 1, colors.black),
]

def collect_report_data(users, submissions, problems, now):
    """Leaderboard plus one dict per ranked user with score and daily activity.

    Submissions made after ``now`` are left out so a dated report only sees
    the history as it stood on that date.
    """
    problems = list(problems)
    submissions = [s for s in submissions if s.created_at <= now]
    board = build_leaderboard(users, submissions, problems, now)
    index = build_difficulty_index(problems)
    by_user = group_by_user(submissions)

    students = []
    for entry in board:
        try:
            user_subs = by_user.get(entry.uid, [])
            report = score_with_index(user_subs, index, now)
            freq_days = Counter(utc_day(s.created_at).isoformat() for s in user_subs)
            students.append({
                "entry": entry.model_dump(by_alias=True),
                "report": report.model_dump(by_alias=True),
                "freq_days": dict(freq_days),
            })
        except Exception as e:
            print(f"Warning: Could not process {entry.uid}: {e}")
    return board, students

class PDFWithFooter(BaseDocTemplate):
    """Custom PDF document template with footer on each page"""

    def __init__(self, filename, footer_text, as_of=None, **kwargs):
        BaseDocTemplate.__init__(self, filename, **kwargs)
        self.footer_text = footer_text
        self.as_of = as_of
        self.page_width, self.page_height = A4

        frame = Frame(
            self.leftMargin,
            self.bottomMargin,
            self.width,
            self.height - 0.5*inch,
            id='normal'
        )

        template = PageTemplate(
            id='with_footer',
            frames=frame,
            onPage=self.add_footer
        )

        self.addPageTemplates([template])

    def add_footer(self, canvas, doc):
        canvas.saveState()
        canvas.setFont('Helvetica-Oblique', 8)

        footer_y = 0.25*inch
        canvas.drawCentredString(self.page_width/2.0, footer_y, self.footer_text)

        if self.as_of:
            canvas.setFont('Helvetica', 8)
            canvas.drawRightString(self.page_width - 0.5*inch, footer_y, f"As of: {self.as_of}")

        canvas.restoreState()

def activity_rows(freq_days, now):
    rows = [["Date", "Day of Week", "Submissions"]]
    today = utc_day(now)
    for offset in range(ACTIVITY_DAYS):
        day = today - timedelta(days=offset)
        count = freq_days.get(day.isoformat(), 0)
        if count > 0:
            rows.append([day.strftime("%d %b %Y"), day.strftime("%A"), str(count)])
    return rows

def generate_pdf_report(board, students, now, output_filename):
    """Generate the readiness PDF: leaderboard first, then one page per user"""

    footer_text = "This report was automatically generated and is for informational purposes only."

    doc = PDFWithFooter(
        output_filename,
        footer_text,
        as_of=now.strftime('%d/%m/%Y %H:%M UTC'),
        pagesize=A4,
        rightMargin=0.5*inch,
        leftMargin=0.5*inch,
        topMargin=0.5*inch,
        bottomMargin=0.75*inch
    )

    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'Title',
        parent=styles['Heading1'],
        fontSize=22,
        alignment=TA_CENTER,
        spaceAfter=6
    )

    subtitle_style = ParagraphStyle(
        'Subtitle',
        parent=styles['Heading2'],
        fontSize=18,
        alignment=TA_CENTER,
        spaceAfter=12
    )

    section_style = ParagraphStyle(
        'Section',
        parent=styles['Heading2'],
        fontSize=14,
        alignment=TA_LEFT,
        spaceAfter=6
    )

    normal_style = styles["Normal"]
    elements = []

    elements.append(Paragraph("Leaderboard", title_style))
    elements.append(Spacer(1, 0.2*inch))
    if board:
        board_data = [["Rank", "Name", "Solved", "Accuracy", "Streak", "Improvement", "Score"]]
        for entry in board:
            board_data.append([
                str(entry.rank),
                entry.full_name,
                str(entry.problems_solved),
                f"{entry.accuracy}%",
                str(entry.streak),
                entry.improvement,
                str(entry.score),
            ])
        board_table = Table(board_data, colWidths=[0.6*inch, 2.4*inch, 0.8*inch, 0.9*inch, 0.8*inch, 1.1*inch, 0.8*inch])
        board_table.setStyle(TableStyle(HEADER_STYLE))
        elements.append(board_table)
    else:
        elements.append(Paragraph("No ranked users", normal_style))

    for student in students:
        entry = student["entry"]
        report = student["report"]
        elements.append(PageBreak())

        elements.append(Paragraph(f"Name: {entry['fullName']}", title_style))
        elements.append(Paragraph(f"Rank #{entry['rank']}", subtitle_style))
        elements.append(Spacer(1, 0.2*inch))

        elements.append(Paragraph("Score Overview", section_style))
        overview_data = [
            ["Easy", "Medium", "Hard", "Accuracy", "Streak", "Improvement"],
            [
                str(report["easyCount"]),
                str(report["mediumCount"]),
                str(report["hardCount"]),
                f"{report['accuracy']}%",
                str(report["streak"]),
                str(report["improvement"]),
            ]
        ]
        overview_table = Table(overview_data, colWidths=[1.2*inch] * 6)
        overview_table.setStyle(TableStyle(HEADER_STYLE))
        elements.append(overview_table)
        elements.append(Spacer(1, 0.3*inch))

        elements.append(Paragraph("Score Breakdown", section_style))
        breakdown_data = [
            ["Difficulty", "Accuracy", "Consistency", "Improvement", "Total"],
            [
                str(report["diffScore"]),
                str(report["accuracy"]),
                str(report["consScore"]),
                str(report["impScore"]),
                str(report["total"]),
            ]
        ]
        breakdown_table = Table(breakdown_data, colWidths=[1.4*inch] * 5)
        breakdown_table.setStyle(TableStyle(HEADER_STYLE))
        elements.append(breakdown_table)
        elements.append(Spacer(1, 0.3*inch))

        elements.append(Paragraph(f"Activity (last {ACTIVITY_DAYS} days)", section_style))
        rows = activity_rows(student["freq_days"], now)
        if len(rows) > 1:
            activity_table = Table(rows, colWidths=[1.5*inch, 2*inch, 2*inch])
            activity_table.setStyle(TableStyle(HEADER_STYLE))
            elements.append(activity_table)
        else:
            elements.append(Paragraph("No activity in this period", normal_style))

    doc.build(elements)

def print_usage():
    print("Usage: python export_pdf.py [as_of_date]")
    print("Date format: DDMMYYYY (e.g., 01012025 for January 1, 2025)")

def main(argv, store=None):
    if len(argv) > 1:
        print_usage()
        return 1

    if argv:
        try:
            as_of = parse_date(argv[0])
        except ValueError:
            print_usage()
            return 1
        now = pytz.utc.localize(datetime(as_of.year, as_of.month, as_of.day, 23, 59, 59))
    else:
        now = utc_now()
    print(f"Generating readiness report as of {now.strftime('%d/%m/%Y')}")

    store = store or open_store()
    board, students = collect_report_data(store.users(), store.submissions(), store.problems(), now)
    if not board:
        print("Error: No ranked users found")
        return 1
    print(f"Ranked {len(board)} users")

    output_filename = f"readiness_report_{now.strftime('%d%m%Y')}.pdf"
    try:
        generate_pdf_report(board, students, now, output_filename)
        print(f"PDF report generated successfully: {output_filename}")
    except Exception as e:
        print(f"Error generating PDF: {e}")
        return 1
    return 0

if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    sys.exit(main(sys.argv[1:]))

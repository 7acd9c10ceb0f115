from __future__ import annotations  # Styled PDF rendering for interview feedback reports

import datetime as dt
from typing import Any, List, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from engines.anti_cheat import IntegrityReport
from engines.feedback import HEADLINES, FeedbackReport, RoadmapItem

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background
PASS_COLOR = (30, 140, 70)  # Passed badge
FAIL_COLOR = (200, 60, 50)  # Not passed badge

LEVEL_NAMES = {1: "Easy", 2: "Medium", 3: "Hard"}


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


def _format_duration(seconds: float) -> str:  # Minutes and seconds for display
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}m {secs:02d}s"


def _fmt(value: float) -> str:
    return f"{value:g}"


class ReportPDF(FPDF):  # PDF with custom header/footer styling
    def __init__(self, *args, accent: Tuple[int, int, int] = ACCENT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.accent = accent
        self.header_title = "Interview Feedback Report"
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"
        self._supports_unicode = False

    def _prepare_text(self, text: Any) -> str:  # Sanitize text for the active font
        value = "" if text is None else str(text)
        value = "".join(ch for ch in value if ord(ch) <= 0xFFFF)
        if self._supports_unicode:
            return value
        cleaned = value.replace("•", "-").replace("→", "->")
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    def cell(self, *args, **kwargs):  # Wrap base cell with text sanitisation
        args_list = list(args)
        if len(args_list) >= 3:
            args_list[2] = self._prepare_text(args_list[2])
        elif "text" in kwargs:
            kwargs["text"] = self._prepare_text(kwargs["text"])
        return super().cell(*args_list, **kwargs)

    def multi_cell(self, *args, **kwargs):  # Wrap base multi_cell with text sanitisation
        args_list = list(args)
        if len(args_list) >= 3:
            args_list[2] = self._prepare_text(args_list[2])
        elif "text" in kwargs:
            kwargs["text"] = self._prepare_text(kwargs["text"])
        return super().multi_cell(*args_list, **kwargs)

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            self.set_font(self._font_bold, "B", 16)
            self.set_fill_color(*self.accent)
            self.rect(0, 0, self.w, 18, style="F")
            self.set_text_color(255, 255, 255)
            self.set_xy(self.l_margin, 6)
            self.multi_cell(usable, 8, self.header_title)
            self.set_text_color(*TEXT)
            self.ln(4)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self._font_bold, "B", 12)
            self.multi_cell(usable, 6, self.header_title)
            mark = self.get_y()
            self.set_draw_color(*self.accent)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self._font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _bullet(pdf: ReportPDF) -> str:
    return "•" if pdf._supports_unicode else "-"


def _section_title(pdf: ReportPDF, title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf._font_bold, "B", 13)
    pdf.cell(0, 9, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: ReportPDF, rows: List[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    line = 6
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.cell(col, line, left[0], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[0], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 11)
        pdf.cell(col, line, left[1], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, line, right[1], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _paragraph(pdf: ReportPDF, text: str, *, muted: bool = False, size: int = 11) -> None:
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*(MUTED if muted else TEXT))
    pdf.set_font(pdf._font_regular, "", size)
    pdf.multi_cell(_effective_width(pdf), 6, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)


def _bullets(pdf: ReportPDF, items: Sequence[str], empty: str) -> None:  # Render bullet list or placeholder
    if not items:
        _paragraph(pdf, empty, muted=True, size=10)
        pdf.ln(2)
        return
    bullet = _bullet(pdf)
    for item in items:
        _paragraph(pdf, f"{bullet} {item}", size=10)
    pdf.ln(2)


def _score_banner(pdf: ReportPDF, report: FeedbackReport) -> None:  # Overall score callout
    summary = report.summary
    width = _effective_width(pdf)
    top = pdf.get_y()
    pdf.set_fill_color(*SOFT_ACCENT_BG)
    pdf.rect(pdf.l_margin, top, width, 18, style="F")
    pdf.set_xy(pdf.l_margin + 6, top + 3)
    pdf.set_text_color(*MUTED)
    pdf.set_font(pdf._font_regular, "", 10)
    pdf.cell(width / 2, 6, f"{summary.tier.label} performance")
    pdf.set_xy(pdf.l_margin + 6, top + 9)
    pdf.set_text_color(*(PASS_COLOR if summary.passed else FAIL_COLOR))
    pdf.set_font(pdf._font_bold, "B", 11)
    pdf.cell(width / 2, 6, "PASSED" if summary.passed else "NOT PASSED")
    pdf.set_xy(pdf.l_margin, top + 4)
    pdf.set_text_color(*ACCENT)
    pdf.set_font(pdf._font_bold, "B", 18)
    pdf.cell(width - 6, 10, f"{_fmt(summary.overall_score)}/10", align="R")
    pdf.set_y(top + 22)
    pdf.set_text_color(*TEXT)


def _render_dimensions(pdf: ReportPDF, report: FeedbackReport) -> None:  # Draw dimension table
    width = _effective_width(pdf)
    widths = [width * 0.3, width * 0.12, width * 0.58]
    pdf.set_x(pdf.l_margin)
    pdf.set_fill_color(*ACCENT)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(pdf._font_bold, "B", 10)
    for idx, title in enumerate(["Dimension", "Score", "Feedback"]):
        pdf.cell(widths[idx], 8, title, align="L", fill=True)
    pdf.ln(8)
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_regular, "", 10)
    for idx, item in enumerate(report.dimensions.ordered()):
        fill = idx % 2 == 0
        if fill:
            pdf.set_fill_color(247, 250, 255)
        top = pdf.get_y()
        pdf.set_xy(pdf.l_margin + widths[0] + widths[1], top)
        pdf.multi_cell(widths[2], 6, item.feedback, fill=fill, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        bottom = pdf.get_y()
        pdf.set_xy(pdf.l_margin, top)
        pdf.cell(widths[0], bottom - top, item.label, fill=fill)
        pdf.cell(widths[1], bottom - top, f"{_fmt(item.score)}/10", fill=fill)
        pdf.set_y(bottom)
    pdf.ln(3)


def _roadmap_lines(items: Sequence[RoadmapItem]) -> List[str]:
    lines = []
    for item in items:
        prefix = f"[{item.priority}] "
        lines.append(f"{prefix}{item.area}: {item.action}" if item.area else f"{prefix}{item.action}")
    return lines


def _render_integrity(pdf: ReportPDF, integrity: Optional[IntegrityReport]) -> None:  # Integrity summary
    if integrity is None:
        _paragraph(pdf, "No integrity data recorded for this session.", muted=True, size=10)
        return
    timing = integrity.timing
    average = timing.average_response_time_sec
    _meta_block(
        pdf,
        [
            ("Suspicion Score", f"{integrity.overall_suspicion_score}/100"),
            ("Level", integrity.suspicion_level.title()),
            ("Flags Raised", str(integrity.total_flags)),
            ("Avg Response Time", f"{_fmt(average)}s" if average is not None else "-"),
        ],
    )
    _paragraph(pdf, integrity.verdict, size=10)
    pdf.ln(1)
    _bullets(
        pdf,
        [f"{flag.type} ({flag.severity}): {flag.detail}" for flag in integrity.flags],
        "No integrity flags raised.",
    )


def render_feedback_pdf(  # Build PDF payload for a completed interview
    report: FeedbackReport,
    integrity: Optional[IntegrityReport] = None,
    *,
    session_id: str,
    candidate_id: str,
    generated_at: Optional[dt.datetime] = None,
) -> bytes:
    pdf = ReportPDF()
    pdf.alias_nb_pages()
    try:
        pdf.add_font("DejaVu", "", DEJAVU_SANS)
        pdf.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        pdf._font_regular = "DejaVu"
        pdf._font_bold = "DejaVu"
        pdf._supports_unicode = True
    except (OSError, RuntimeError):  # pragma: no cover - system fonts are optional
        pdf._font_regular = "Helvetica"
        pdf._font_bold = "Helvetica"
        pdf._supports_unicode = False
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    summary = report.summary
    generated = generated_at or dt.datetime.now(dt.timezone.utc)
    progression = report.difficulty_progression

    _section_title(pdf, "Session Overview")
    _meta_block(
        pdf,
        [
            ("Session ID", session_id),
            ("Candidate ID", candidate_id),
            ("Questions", str(summary.question_count)),
            ("Duration", _format_duration(summary.duration_sec)),
            (
                "Difficulty",
                f"{LEVEL_NAMES[progression.start_level]} -> {LEVEL_NAMES[progression.end_level]} ({progression.trajectory})"
                if progression
                else "-",
            ),
            ("Generated", generated.strftime("%d %b %Y, %H:%M UTC")),
        ],
    )
    _score_banner(pdf, report)
    _paragraph(pdf, HEADLINES[summary.tier.key])
    _paragraph(pdf, summary.tier.description, muted=True, size=10)
    pdf.ln(3)

    _section_title(pdf, "Dimensions")
    _render_dimensions(pdf, report)

    _section_title(pdf, "Strengths")
    _bullets(
        pdf,
        [f"{item.text} ({item.consistency}% of answers)" for item in report.strengths],
        "No consistent strengths identified yet.",
    )

    _section_title(pdf, "Areas to Improve")
    _bullets(
        pdf,
        [f"[{item.priority}] {item.text} (x{item.frequency})" for item in report.improvements],
        "No recurring weaknesses detected.",
    )

    _section_title(pdf, "Improvement Roadmap")
    for title, items in (
        ("Immediate", report.roadmap.immediate),
        ("Short term", report.roadmap.short_term),
        ("Long term", report.roadmap.long_term),
    ):
        pdf.set_x(pdf.l_margin)
        pdf.set_font(pdf._font_bold, "B", 11)
        pdf.cell(0, 7, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        _bullets(pdf, _roadmap_lines(items), "Nothing planned for this horizon.")

    highlights = report.answer_highlights
    if highlights.best is not None:
        _section_title(pdf, "Answer Highlights")
        _paragraph(pdf, f"Best answer: #{highlights.best.answer_number} scored {highlights.best.score}/10", size=10)
        if highlights.worst is not None and highlights.worst.answer_number != highlights.best.answer_number:
            _paragraph(
                pdf,
                f"Weakest answer: #{highlights.worst.answer_number} scored {highlights.worst.score}/10",
                size=10,
            )
        pdf.ln(3)

    _section_title(pdf, "Integrity")
    _render_integrity(pdf, integrity)

    return bytes(pdf.output())


__all__ = ["ReportPDF", "render_feedback_pdf"]

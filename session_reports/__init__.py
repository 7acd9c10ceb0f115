from __future__ import annotations  # Feedback report rendering exports

from .pdf import ReportPDF, render_feedback_pdf

__all__ = ["ReportPDF", "render_feedback_pdf"]

# pdf_report.py
from datetime import datetime
from io import BytesIO
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from models import EyeHealthScore

PAGE_W, PAGE_H = letter
MARGIN_X = 0.65 * inch
CONTENT_W = PAGE_W - (2 * MARGIN_X)
BOTTOM_Y = 0.8 * inch
TEXT_W = CONTENT_W - 0.34 * inch

RGB = Tuple[float, float, float]

# category -> (chip background, chip foreground)
CATEGORY_COLORS = {
    "excellent": ((0.89, 0.97, 0.90), (0.09, 0.45, 0.24)),
    "good": ((0.90, 0.95, 0.99), (0.10, 0.36, 0.62)),
    "fair": ((0.99, 0.95, 0.84), (0.66, 0.45, 0.06)),
    "poor": ((0.99, 0.91, 0.84), (0.72, 0.32, 0.05)),
    "critical": ((0.99, 0.89, 0.89), (0.67, 0.08, 0.08)),
}

FOOTER = "Decision support only. Not a diagnosis. Review these results with a licensed eye care professional."


def _wrap(text: str, font: str, size: float, width: float) -> List[str]:
    if not text:
        return []
    return simpleSplit(str(text), font, size, width)


def _new_page(c: canvas.Canvas) -> float:
    c.setFillColorRGB(0.96, 0.98, 0.99)
    c.rect(0, 0, PAGE_W, PAGE_H, fill=1, stroke=0)

    c.setFillColorRGB(0.06, 0.30, 0.40)
    c.roundRect(MARGIN_X, PAGE_H - 1.0 * inch, CONTENT_W, 0.5 * inch, 10, fill=1, stroke=0)

    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 15)
    c.drawString(MARGIN_X + 0.14 * inch, PAGE_H - 0.72 * inch, "OcuScore Eye Health Report")
    c.setFont("Helvetica", 9)
    c.drawRightString(PAGE_W - MARGIN_X - 0.12 * inch, PAGE_H - 0.71 * inch, f"Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}")

    return PAGE_H - 1.22 * inch


def _section_title(c: canvas.Canvas, y: float, title: str) -> float:
    c.setFillColorRGB(0.10, 0.24, 0.36)
    c.setFont("Helvetica-Bold", 11)
    c.drawString(MARGIN_X, y, title)
    c.setStrokeColorRGB(0.80, 0.85, 0.90)
    c.setLineWidth(0.8)
    c.line(MARGIN_X, y - 0.05 * inch, PAGE_W - MARGIN_X, y - 0.05 * inch)
    return y - 0.2 * inch


def _card_height(title_lines: List[str], body_lines: List[str]) -> float:
    title_h = max(1, len(title_lines)) * 12
    body_h = max(1, len(body_lines)) * 11
    return max(0.78 * inch, 0.18 * inch + title_h + body_h + 0.10 * inch)


def _ensure_space(c: canvas.Canvas, y: float, needed_height: float) -> float:
    if y - needed_height >= BOTTOM_Y:
        return y
    c.showPage()
    return _new_page(c)


def _card(c: canvas.Canvas, y: float, title: str, body: str, accent_rgb: RGB) -> float:
    """Draw a card, breaking to a new page first if it would not fit."""
    title_lines = _wrap(title, "Helvetica-Bold", 10, TEXT_W)
    body_lines = _wrap(body, "Helvetica", 9.5, TEXT_W)
    h = _card_height(title_lines, body_lines)
    y = _ensure_space(c, y, h + 0.1 * inch)

    c.setFillColorRGB(1, 1, 1)
    c.setStrokeColorRGB(0.83, 0.88, 0.92)
    c.roundRect(MARGIN_X, y - h, CONTENT_W, h, 9, fill=1, stroke=1)

    c.setFillColorRGB(*accent_rgb)
    c.roundRect(MARGIN_X + 0.06 * inch, y - h + 0.06 * inch, 0.08 * inch, h - 0.12 * inch, 4, fill=1, stroke=0)

    tx = MARGIN_X + 0.20 * inch
    ty = y - 0.12 * inch

    c.setFillColorRGB(0.12, 0.18, 0.24)
    c.setFont("Helvetica-Bold", 10)
    for ln in title_lines:
        c.drawString(tx, ty, ln)
        ty -= 12

    c.setFillColorRGB(0.20, 0.27, 0.34)
    c.setFont("Helvetica", 9.5)
    for ln in body_lines:
        c.drawString(tx, ty, ln)
        ty -= 11

    return y - h - 0.10 * inch


def _score_accent(score: float) -> RGB:
    if score >= 75:
        return (0.22, 0.53, 0.29)
    if score >= 40:
        return (0.78, 0.53, 0.10)
    return (0.75, 0.20, 0.18)


def _risk_accent(risk: float) -> RGB:
    # Per-condition risk is the inverse sense of a health score.
    return _score_accent(100 - risk)


def render_report_bytes(result: EyeHealthScore, patient_name: Optional[str] = None) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = _new_page(c)

    patient_name = (patient_name or "").strip()
    if patient_name:
        y = _section_title(c, y, "Patient")
        y = _card(c, y, f"Hi {patient_name}!", "Here is your personalized eye health summary.", (0.06, 0.50, 0.60))

    y = _section_title(c, y, "Eye Health Summary")
    y = _ensure_space(c, y, 0.55 * inch)
    chip_bg, chip_fg = CATEGORY_COLORS.get(result.category, CATEGORY_COLORS["fair"])
    c.setFillColorRGB(*chip_bg)
    c.roundRect(MARGIN_X, y - 0.24 * inch, 2.3 * inch, 0.3 * inch, 7, fill=1, stroke=0)
    c.setFillColorRGB(*chip_fg)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(MARGIN_X + 0.1 * inch, y - 0.12 * inch, f"Category: {result.category.upper()}")
    c.setFillColorRGB(0.12, 0.18, 0.24)
    c.drawString(MARGIN_X + 2.45 * inch, y - 0.12 * inch, f"Score: {result.overall_score:g} / 100")
    y -= 0.40 * inch

    y = _section_title(c, y, "Component Scores")
    for name, score in result.component_scores.model_dump().items():
        y = _card(c, y, f"{name.title()}: {score:g} / 100", "", _score_accent(score))

    y = _section_title(c, y, "Condition Risk Estimates")
    labels = {"glaucoma": "Glaucoma", "amd": "Age-related macular degeneration",
              "diabetic_retinopathy": "Diabetic retinopathy"}
    for key, risk in result.risk_assessment.model_dump().items():
        y = _card(c, y, f"{labels[key]}: {risk:g}%", "", _risk_accent(risk))

    y = _section_title(c, y, "Recommendations")
    if not result.recommendations:
        y = _card(c, y, "No specific actions", "Continue routine comprehensive eye examinations.", (0.45, 0.52, 0.60))
    for i, rec in enumerate(result.recommendations, start=1):
        y = _card(c, y, f"Recommendation {i}", rec, (0.12, 0.42, 0.62))

    if result.ai_insights:
        y = _section_title(c, y, "Insights")
        for insight in result.ai_insights:
            y = _card(c, y, "Finding", insight, (0.43, 0.42, 0.56))

    c.setFillColorRGB(0.36, 0.42, 0.48)
    c.setFont("Helvetica-Oblique", 8)
    fy = BOTTOM_Y - 0.1 * inch
    for ln in _wrap(FOOTER, "Helvetica-Oblique", 8, CONTENT_W):
        c.drawString(MARGIN_X, fy, ln)
        fy -= 9

    c.showPage()
    c.save()
    out = buf.getvalue()
    buf.close()
    return out

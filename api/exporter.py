"""Render stored content as downloadable text, Markdown, CSV or PDF."""
import csv
import html
import io
import re
from typing import Iterable

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from db import ContentRecord

CSV_HEADER = [
    "ID", "Topic", "Titles", "Description", "Tags", "Thumbnail Ideas",
    "Script Outline", "AI Model", "Favorite", "Created At",
]
_LIST_SEPARATOR = " | "

# format → (media type, file extension)
MEDIA_TYPES: dict[str, tuple[str, str]] = {
    "text": ("text/plain; charset=utf-8", "txt"),
    "markdown": ("text/markdown; charset=utf-8", "md"),
    "csv": ("text/csv; charset=utf-8", "csv"),
    "pdf": ("application/pdf", "pdf"),
}


def filename_for(record: ContentRecord, fmt: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", record.topic.lower()).strip("-")[:50] or "content"
    return f"{slug}-{record.id[:8]}.{MEDIA_TYPES[fmt][1]}"


def _numbered(items: Iterable[str]) -> list[str]:
    return [f"{i}. {item}" for i, item in enumerate(items, 1)]


# ── text ──────────────────────────────────────────────────────────────────────

def to_text(record: ContentRecord) -> str:
    rule = "=" * 60
    lines = [
        f"YOUTUBE CONTENT: {record.topic}",
        rule,
        "",
        "TITLES",
        "-" * 6,
        *_numbered(record.titles),
        "",
        "DESCRIPTION",
        "-" * 11,
        record.description,
        "",
        "TAGS",
        "-" * 4,
        ", ".join(record.tags),
        "",
        "THUMBNAIL IDEAS",
        "-" * 15,
        *_numbered(record.thumbnail_ideas),
        "",
        "SCRIPT OUTLINE",
        "-" * 14,
        *_numbered(record.script_outline),
        "",
        rule,
        f"Model: {record.ai_model}",
        f"Created: {record.created_at.isoformat()}",
    ]
    return "\n".join(lines) + "\n"


# ── markdown ──────────────────────────────────────────────────────────────────

def to_markdown(record: ContentRecord) -> str:
    lines = [
        f"# {record.topic}",
        "",
        "## 🎬 Titles",
        "",
        *_numbered(record.titles),
        "",
        "## 📝 Description",
        "",
        record.description,
        "",
        "## 🏷️ Tags",
        "",
        " ".join(f"`{tag}`" for tag in record.tags),
        "",
        "## 🖼️ Thumbnail Ideas",
        "",
        *(f"- {idea}" for idea in record.thumbnail_ideas),
        "",
        "## 📋 Script Outline",
        "",
        *_numbered(record.script_outline),
        "",
        "---",
        "",
        f"*Model: {record.ai_model} · Created: {record.created_at.isoformat()}*",
    ]
    return "\n".join(lines) + "\n"


# ── csv ───────────────────────────────────────────────────────────────────────

def _csv_row(record: ContentRecord) -> list[str]:
    return [
        record.id,
        record.topic,
        _LIST_SEPARATOR.join(record.titles),
        record.description,
        _LIST_SEPARATOR.join(record.tags),
        _LIST_SEPARATOR.join(record.thumbnail_ideas),
        _LIST_SEPARATOR.join(record.script_outline),
        record.ai_model,
        "yes" if record.is_favorite else "no",
        record.created_at.isoformat(),
    ]


def to_csv(records: Iterable[ContentRecord]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(_csv_row(record))
    return buf.getvalue()


# ── pdf ───────────────────────────────────────────────────────────────────────

def _pdf_styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "PdfTitle",
            parent=base["Heading1"],
            fontName="Helvetica-Bold",
            fontSize=17,
            leading=21,
            spaceAfter=6,
            textColor=colors.HexColor("#111827"),
        ),
        "meta": ParagraphStyle(
            "PdfMeta",
            parent=base["BodyText"],
            fontName="Helvetica",
            fontSize=9.5,
            leading=12.5,
            textColor=colors.HexColor("#4B5563"),
        ),
        "section": ParagraphStyle(
            "PdfSection",
            parent=base["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=12.5,
            leading=16,
            spaceBefore=6,
            spaceAfter=6,
            textColor=colors.HexColor("#111827"),
        ),
        "body": ParagraphStyle(
            "PdfBody",
            parent=base["BodyText"],
            fontName="Helvetica",
            fontSize=10.5,
            leading=14,
        ),
    }


def _pdf_list(items: list[str], style: ParagraphStyle, numbered: bool) -> ListFlowable:
    return ListFlowable(
        [ListItem(Paragraph(html.escape(str(item)), style), leftIndent=6) for item in items],
        bulletType="1" if numbered else "bullet",
        leftIndent=14,
        bulletFontSize=8 if not numbered else 10,
    )


def to_pdf(record: ContentRecord) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=16 * mm,
        rightMargin=16 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title=record.topic,
    )
    styles = _pdf_styles()
    story = [
        Paragraph(html.escape(record.topic), styles["title"]),
        Paragraph(
            html.escape(f"Model: {record.ai_model} · Created: {record.created_at:%Y-%m-%d %H:%M} UTC"),
            styles["meta"],
        ),
        Spacer(1, 8),
        Paragraph("Titles", styles["section"]),
        _pdf_list(record.titles, styles["body"], numbered=True),
        Paragraph("Description", styles["section"]),
        Paragraph(html.escape(record.description), styles["body"]),
        Paragraph("Tags", styles["section"]),
        Paragraph(html.escape(", ".join(record.tags)), styles["body"]),
        Paragraph("Thumbnail Ideas", styles["section"]),
        _pdf_list(record.thumbnail_ideas, styles["body"], numbered=False),
        Paragraph("Script Outline", styles["section"]),
        _pdf_list(record.script_outline, styles["body"], numbered=True),
    ]
    doc.build(story)
    return buf.getvalue()


def render(record: ContentRecord, fmt: str) -> str | bytes:
    if fmt == "text":
        return to_text(record)
    if fmt == "markdown":
        return to_markdown(record)
    if fmt == "csv":
        return to_csv([record])
    if fmt == "pdf":
        return to_pdf(record)
    raise ValueError(f"Unknown export format: {fmt!r}")

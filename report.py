"""
Financial report export.

``build_report`` collects what goes on paper; ``export_pdf`` draws it with
reportlab on letter pages and writes it to the temp directory.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

import aggregation
from entities import ExpenseStatus, Goal
from errors import DocumentExportError
from formatting import format_brl, format_date

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = letter
MARGIN = 40
FOOTER_Y = 40
TOP_Y = 720
FOOTER_TEXT = 'LifeOS - Seu assistente financeiro pessoal'


@dataclass
class LineItem:
    label: str
    amount: Optional[str] = None
    detail: Optional[str] = None
    color: Optional[str] = None
    notes: List[str] = field(default_factory=list)


@dataclass
class ReportSection:
    title: str
    items: List[LineItem]
    empty_message: str


@dataclass
class FinancialReport:
    generated_at: datetime
    summary: List[LineItem]
    sections: List[ReportSection]

    @property
    def title(self):
        return 'RELATÓRIO FINANCEIRO'

    @property
    def subtitle(self):
        return f"LifeOS - Gerado em {format_date(self.generated_at)}"


def build_report(repo, clock, item_limit=10):
    incomes = aggregation.month_incomes(repo, clock)
    expenses = aggregation.month_expenses(repo, clock)
    goals = repo.find_all(Goal)

    summary = [
        LineItem('Saldo Atual:', format_brl(aggregation.balance(repo))),
        LineItem('Receitas do Mês:', format_brl(aggregation.total(incomes))),
        LineItem('Despesas do Mês:', format_brl(aggregation.total(expenses))),
    ]
    income_items = [
        LineItem(f"• {i.description}", format_brl(i.amount), format_date(i.date))
        for i in incomes[:item_limit]
    ]
    expense_items = [
        LineItem(
            f"• {e.description}",
            format_brl(e.amount),
            e.status.value,
            'green' if e.status is ExpenseStatus.PAID else 'red',
        )
        for e in expenses[:item_limit]
    ]
    goal_items = [
        LineItem(f"• {g.name}", notes=[
            f"Meta: {format_brl(g.target_amount)} | Acumulado: {format_brl(g.accumulated_amount)}",
            f"Progresso: {g.percent}%",
        ])
        for g in goals
    ]
    return FinancialReport(
        generated_at=clock.now(),
        summary=summary,
        sections=[
            ReportSection('RECEITAS DO MÊS', income_items, 'Nenhuma receita registrada'),
            ReportSection('DESPESAS DO MÊS', expense_items, 'Nenhuma despesa registrada'),
            ReportSection('METAS FINANCEIRAS', goal_items, 'Nenhuma meta cadastrada'),
        ],
    )


class _PageWriter:
    """Top-down cursor over a reportlab canvas that breaks pages."""

    def __init__(self, pdf):
        self.pdf = pdf
        self.y = TOP_Y

    def text(self, value, x=MARGIN, size=11, bold=False, color=colors.black):
        self.pdf.setFont('Helvetica-Bold' if bold else 'Helvetica', size)
        self.pdf.setFillColor(color)
        self.pdf.drawString(x, self.y - size, value)

    def advance(self, step):
        self.y -= step
        if self.y < FOOTER_Y + 30:
            self.new_page()

    def rule(self, y=None):
        y = self.y if y is None else y
        self.pdf.setStrokeColor(colors.gray)
        self.pdf.setLineWidth(0.5)
        self.pdf.line(MARGIN, y, PAGE_WIDTH - MARGIN, y)

    def footer(self):
        self.rule(FOOTER_Y)
        self.pdf.setFont('Helvetica', 10)
        self.pdf.setFillColor(colors.gray)
        self.pdf.drawString(MARGIN, FOOTER_Y - 15, FOOTER_TEXT)

    def new_page(self):
        self.footer()
        self.pdf.showPage()
        self.y = TOP_Y


def draw_report(pdf, report):
    page = _PageWriter(pdf)
    page.text(report.title, size=24, bold=True)
    page.advance(30)
    page.text(report.subtitle, size=12, color=colors.gray)
    page.advance(40)
    page.rule()
    page.advance(30)

    page.text('RESUMO FINANCEIRO', size=18, bold=True)
    page.advance(25)
    for index, item in enumerate(report.summary):
        page.text(item.label, size=14)
        page.text(item.amount, x=200, size=14, bold=index == 0)
        page.advance(20)
    page.advance(15)

    for section in report.sections:
        page.text(section.title, size=16, bold=True)
        page.advance(25)
        if not section.items:
            page.text(section.empty_message, size=12, color=colors.gray)
            page.advance(20)
        for item in section.items:
            page.text(item.label, size=11, bold=bool(item.notes))
            if item.amount:
                page.text(item.amount, x=400, size=11)
            if item.detail:
                page.text(item.detail, x=500, size=10, color=getattr(colors, item.color or 'gray'))
            page.advance(15 if item.notes else 18)
            for note in item.notes:
                page.text(note, x=50, size=10)
                page.advance(15)
            if item.notes:
                page.advance(5)
        page.advance(15)

    page.footer()


def export_pdf(report, directory=None):
    """Write ``report`` as a PDF and return its path."""
    directory = directory or tempfile.gettempdir()
    path = os.path.join(directory, f"RelatorioFinanceiro_{report.generated_at.timestamp():.0f}.pdf")

    try:
        pdf = canvas.Canvas(path, pagesize=letter)
        pdf.setTitle(report.title)
        draw_report(pdf, report)
    except (ValueError, TypeError, AttributeError) as exc:
        logger.error("could not draw report: %s", exc)
        raise DocumentExportError(f"could not create the PDF document: {exc}") from exc

    try:
        pdf.save()
    except OSError as exc:
        logger.error("could not write %s: %s", path, exc)
        raise DocumentExportError(f"could not save the PDF to {path}: {exc}") from exc

    logger.info("report written to %s", path)
    return path

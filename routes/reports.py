import os

from flask import Blueprint, current_app, redirect, render_template, send_file, url_for

import aggregation
from errors import DocumentExportError
from report import build_report, export_pdf
from view_utils import report_error

reports_bp = Blueprint('reports', __name__, url_prefix='/reports')


@reports_bp.route('/')
def index():
    repo, clock = current_app.repository, current_app.clock
    report = build_report(repo, clock, current_app.config.get('REPORT_ITEM_LIMIT', 10))
    return render_template(
        'reports.html',
        report=report,
        breakdown=aggregation.category_breakdown(repo, clock),
        series=aggregation.trailing_monthly_series(repo, clock),
    )


@reports_bp.route('/export', methods=['POST'])
def export():
    report = build_report(
        current_app.repository,
        current_app.clock,
        current_app.config.get('REPORT_ITEM_LIMIT', 10),
    )
    try:
        path = export_pdf(report)
    except DocumentExportError as exc:
        report_error(f"Falha ao exportar o PDF: {exc}")
        return redirect(url_for('reports.index'))
    return send_file(path, mimetype='application/pdf', as_attachment=True,
                     download_name=os.path.basename(path))

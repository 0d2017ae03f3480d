from flask import Blueprint, current_app, render_template

import aggregation

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='')


@dashboard_bp.route('/')
def index():
    summary = aggregation.dashboard_summary(
        current_app.repository,
        current_app.clock,
        current_app.config.get('RECENT_TRANSACTIONS_LIMIT', 10),
    )
    return render_template(
        'dashboard.html',
        **summary,
        pie_labels=[share.category for share in summary['breakdown']],
        pie_values=[round(share.percent, 2) for share in summary['breakdown']],
    )

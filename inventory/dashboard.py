"""
Dashboard aggregation and server-side rendering.
"""
import html
import json
from typing import List

from .models import DashboardData, Product

TOP_N = 5


def build_dashboard(products: List[Product], top_n: int = TOP_N) -> DashboardData:
    """
    Compute total inventory value, chart arrays and the top products by price.

    Chart labels/values keep the order the products were fetched in. The top
    list is a stable sort, so products with equal prices keep that order too.
    """
    total = 0.0
    labels: List[str] = []
    values: List[int] = []
    for p in products:
        total += p.price * p.stock
        labels.append(p.name)
        values.append(p.stock)

    top = sorted(products, key=lambda p: p.price, reverse=True)[:top_n]

    return DashboardData(
        total_value=f"${total:.2f}",
        total_value_raw=total,
        top_products=top,
        chart_labels=labels,
        chart_values=values,
    )


def render_dashboard(data: DashboardData) -> str:
    """Render the dashboard page as a complete HTML document."""
    rows = ""
    for i, p in enumerate(data.top_products, start=1):
        rows += f"""
            <tr>
                <td>{i}</td>
                <td>{html.escape(p.name)}</td>
                <td style="text-align: right;">${p.price:.2f}</td>
                <td style="text-align: right;">{p.stock}</td>
            </tr>"""
    if not rows:
        rows = '<tr><td colspan="4"><em>No products yet</em></td></tr>'

    # no "<" may reach the inline script, so "</script>" and "<!--" stay inert
    labels_json = json.dumps(data.chart_labels).replace("<", "\\u003c")
    values_json = json.dumps(data.chart_values)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>Inventory Dashboard</title>
    <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
    <style>
        body {{ font-family: sans-serif; margin: 20px; }}
        .card {{ margin: 20px 0; padding: 20px; border: 1px solid #ddd; border-radius: 5px; }}
        table {{ border-collapse: collapse; width: 100%; }}
        th, td {{ padding: 6px 10px; border-bottom: 1px solid #eee; }}
    </style>
</head>
<body>
    <h1>Inventory Dashboard</h1>
    <p><a href="/">Back to products</a></p>
    <div class="card">
        <h2>Total inventory value</h2>
        <p id="total-value" style="font-size: 2em; margin: 0;">{html.escape(data.total_value)}</p>
    </div>
    <div class="card">
        <h2>Top {TOP_N} products by price</h2>
        <table id="top-products">
            <tr><th>#</th><th>Name</th><th>Price</th><th>Stock</th></tr>{rows}
        </table>
    </div>
    <div class="card">
        <h2>Stock per product</h2>
        <canvas id="stockChart"></canvas>
    </div>
    <script>
        new Chart(document.getElementById('stockChart'), {{
            type: 'bar',
            data: {{
                labels: {labels_json},
                datasets: [{{ label: 'Stock', data: {values_json} }}]
            }}
        }});
    </script>
</body>
</html>
"""

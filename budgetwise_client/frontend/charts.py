# budgetwise_client/frontend/charts.py
"""Plotly figures for the dashboard and reports pages.

Each builder takes the plain lists produced by utils.reports and returns a
figure, or None when there is nothing to draw.
"""

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

INCOME_COLOR = "#16a34a"
EXPENSE_COLOR = "#dc2626"
NET_COLOR = "#7c3aed"


def category_pie(categories, title="Expense Distribution"):
    """Donut of [{name, value}] category totals."""
    if not categories:
        return None
    df = pd.DataFrame(categories)
    fig = px.pie(df, names="name", values="value", title=title, hole=0.4)
    fig.update_layout(template="plotly_white")
    return fig


def category_bar(categories, title="Spending by Category"):
    if not categories:
        return None
    df = pd.DataFrame(categories)
    fig = px.bar(df, x="value", y="name", orientation="h", title=title,
                 labels={"value": "Amount", "name": "Category"})
    fig.update_layout(template="plotly_white", showlegend=False, yaxis={"autorange": "reversed"})
    return fig


def monthly_bar(monthly, title="Monthly Income vs Expenses"):
    if not monthly:
        return None
    months = [m["month"] for m in monthly]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=months, y=[m["income"] for m in monthly], name="Income",
                         marker_color=INCOME_COLOR))
    fig.add_trace(go.Bar(x=months, y=[m["expense"] for m in monthly], name="Expense",
                         marker_color=EXPENSE_COLOR))
    fig.add_trace(go.Scatter(x=months, y=[m["net"] for m in monthly], mode="lines+markers",
                             name="Net", line=dict(color=NET_COLOR, width=3)))
    fig.update_layout(
        title=title,
        barmode="group",
        xaxis_title="Month",
        yaxis_title="Amount",
        template="plotly_white",
        hovermode="x unified",
    )
    return fig


def daily_trend(daily, title="Daily Trend"):
    if not daily:
        return None
    df = pd.DataFrame(daily)
    fig = px.line(df, x="date", y=["income", "expense"], title=title,
                  color_discrete_map={"income": INCOME_COLOR, "expense": EXPENSE_COLOR})
    fig.update_layout(template="plotly_white", xaxis_title="Date", yaxis_title="Amount")
    return fig


def income_vs_expense(summary, title="Income vs Expense"):
    if not summary or not summary.get("count"):
        return None
    fig = go.Figure(go.Bar(
        x=["Income", "Expense"],
        y=[summary["income"], summary["expense"]],
        marker_color=[INCOME_COLOR, EXPENSE_COLOR],
    ))
    fig.update_layout(title=title, template="plotly_white", showlegend=False)
    return fig

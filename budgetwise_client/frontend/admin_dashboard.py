# frontend/admin_dashboard.py

import logging
from datetime import datetime

import pandas as pd
import plotly.express as px
import streamlit as st

from budgetwise_client.config import LOG_LEVEL
from budgetwise_client.frontend import charts
from budgetwise_client.models import EXPENSE, EXPORT_FORMATS, INCOME, entity_id
from budgetwise_client.store import Store
from budgetwise_client.utils.formatting import format_currency
from budgetwise_client.utils.reports import build_report
from budgetwise_client.utils.storage import SessionStateStorage

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

ADMIN_ROUTE = "/admin"

# Page config
st.set_page_config(
    page_title="BudgetWise Admin",
    page_icon="🔧",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .admin-header {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        padding: 2rem;
        border-radius: 10px;
        color: white;
        margin-bottom: 2rem;
    }
    .admin-warning {
        background-color: #fff3cd;
        border: 1px solid #ffeaa7;
        border-radius: 5px;
        padding: 1rem;
        margin: 1rem 0;
    }
</style>
""", unsafe_allow_html=True)


def get_store():
    if "admin_store" not in st.session_state:
        st.session_state.admin_store = Store(
            storage=SessionStateStorage(st.session_state, prefix="budgetwise_admin_"))
    return st.session_state.admin_store


def show_feedback(state, clear=None):
    if state.error:
        st.error(f"❌ {state.error}")
    elif state.message:
        st.success(f"✅ {state.message}")
    if clear and (state.error or state.message):
        clear()


def render_login(store):
    """Render admin login form"""
    st.markdown('<div class="admin-header">', unsafe_allow_html=True)
    st.title("🔧 BudgetWise Admin Dashboard")
    st.markdown("System Administration & Analytics")
    st.markdown('</div>', unsafe_allow_html=True)

    st.warning("⚠️ Restricted Access - Administrators Only")

    if store.auth.state.is_authenticated and not store.auth.state.is_admin:
        st.error("❌ This user is not an administrator")
        if st.button("🚪 Logout", key="non_admin_logout"):
            store.logout()
            st.rerun()
        return

    with st.form("admin_login"):
        col1, col2 = st.columns([1, 1])
        with col1:
            username = st.text_input("👤 Admin username", placeholder="admin")
        with col2:
            password = st.text_input("🔒 Password", type="password")

        if st.form_submit_button("🚀 Login as Administrator", use_container_width=True):
            if username and password:
                with st.spinner("Verifying admin access..."):
                    if store.auth.login(username, password):
                        st.rerun()
            else:
                st.error("Please enter both username and password")
    show_feedback(store.auth.state, store.auth.clear_error)


def render_dashboard(store):
    """Render admin dashboard"""
    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        user = store.auth.state.user or {}
        st.title("🔧 BudgetWise Admin Dashboard")
        st.markdown(f"Logged in as: **{user.get('username') or user.get('email', '')}**")
    with col2:
        st.metric("🕒", datetime.now().strftime("%H:%M"))
    with col3:
        if st.button("🚪 Logout", use_container_width=True):
            store.logout()
            st.rerun()

    tab1, tab2, tab3, tab4 = st.tabs([
        "📊 Dashboard",
        "👥 User Management",
        "💳 Transactions",
        "📄 Reports",
    ])
    with tab1:
        render_analytics_dashboard(store)
    with tab2:
        render_user_management(store)
    with tab3:
        render_transaction_view(store)
    with tab4:
        render_reports(store)


def render_analytics_dashboard(store):
    """Render analytics dashboard"""
    st.header("📊 System Analytics")
    slice_ = store.admin_stats
    if st.button("🔄 Refresh", key="refresh_stats") or not slice_.system_stats:
        with st.spinner("Loading system analytics..."):
            slice_.fetch_system_stats()
    if slice_.state.error:
        st.error(f"❌ {slice_.state.error}")
        return

    stats = slice_.system_stats
    st.subheader("📈 Key Metrics")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Users", stats.get("user_count", stats.get("total_users", 0)) or 0)
    col1.metric("Active Users", stats.get("active_users") or 0)
    col2.metric("Total Transactions", stats.get("transaction_count") or 0)
    col3.metric("Total Income", format_currency(float(stats.get("total_income") or 0)))
    col4.metric("Total Expenses", format_currency(float(stats.get("total_expense") or 0)))

    st.subheader("📊 Visual Analytics")
    col1, col2 = st.columns(2)
    with col1:
        st.write("**Expense Categories**")
        distribution = [{"name": item.get("category_name") or "Uncategorized",
                         "value": float(item.get("total_amount") or 0)}
                        for item in stats.get("category_distribution") or []]
        fig = charts.category_pie(distribution, title="")
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No category data available")
    with col2:
        st.write("**Monthly Trends**")
        trends = []
        for item in stats.get("monthly_trends") or []:
            period = item.get("_id") or {}
            income = float(item.get("total_income") or 0)
            expense = float(item.get("total_expense") or 0)
            month = f"{period.get('year', 0):04d}-{period.get('month', 0):02d}" if period else item.get("month", "")
            trends.append({"month": month, "income": income, "expense": expense, "net": income - expense})
        fig = charts.monthly_bar(sorted(trends, key=lambda t: t["month"]), title="")
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No monthly data available")


def render_user_management(store):
    """Render user management section"""
    st.header("👥 User Management")
    slice_ = store.admin_users

    search = st.text_input("🔍 Search users", key="user_search")
    if st.button("🔄 Load users", key="load_users") or not slice_.state.items:
        with st.spinner("Loading users..."):
            slice_.fetch_users(page=slice_.state.page, search=search)

    users = slice_.state.items
    st.subheader(f"📊 User Overview ({slice_.state.total} Users)")
    if users:
        display_data = [{
            "ID": entity_id(user),
            "Username": user.get("username", ""),
            "Email": user.get("email", ""),
            "Role": user.get("role", ""),
            "Active": "🟢" if user.get("is_active") else "🔴",
            "Joined": str(user.get("created_at") or "")[:10] or "N/A",
        } for user in users]
        st.dataframe(pd.DataFrame(display_data), use_container_width=True, hide_index=True)

        labels = {f"{u.get('username', '')} ({u.get('email', '')})": entity_id(u) for u in users}
        chosen = st.selectbox("Select user", list(labels), key="admin_selected_user")
        user_id = labels[chosen]
        col1, col2, col3 = st.columns(3)
        if col1.button("🔁 Toggle status", key="toggle_user"):
            slice_.toggle_user_status(user_id)
        if col2.button("📈 Statistics", key="user_stats"):
            store.admin_stats.fetch_user_statistics(user_id)
        if col3.button("🗑️ Delete user", key="delete_user"):
            slice_.delete_user(user_id)

        user_stats = store.admin_stats.user_statistics
        if user_stats:
            with st.expander("📈 User Statistics", expanded=True):
                st.json(user_stats)

        col_prev, col_next = st.columns(2)
        if col_prev.button("⬅️ Previous", disabled=slice_.state.page <= 1, key="users_prev"):
            slice_.fetch_users(page=slice_.state.page - 1, search=search)
        if col_next.button("Next ➡️", disabled=slice_.state.page >= slice_.state.pages, key="users_next"):
            slice_.fetch_users(page=slice_.state.page + 1, search=search)
    else:
        st.info("👤 No users found in the system")

    show_feedback(slice_.state, slice_.clear_message)


def render_transaction_view(store):
    """Render transaction viewing section"""
    st.header("💳 Transaction Overview")
    slice_ = store.admin_transactions

    col1, col2 = st.columns(2)
    type_filter = col1.selectbox("Type", ["All", INCOME, EXPENSE], key="admin_tx_type")
    per_page = col2.slider("Per page", 10, 100, slice_.state.per_page, step=10, key="admin_tx_per_page")
    if per_page != slice_.state.per_page:
        slice_.set_per_page(per_page)

    filters = {"type": None if type_filter == "All" else type_filter}
    if st.button("🔄 Load transactions", key="load_admin_tx") or not slice_.state.items:
        with st.spinner("Loading transactions..."):
            slice_.fetch_transactions(filters)

    transactions = slice_.state.items
    st.subheader(f"📋 Transactions ({slice_.state.total} total)")
    if not transactions:
        st.info("💳 No transactions found")
        return

    display_data = [{
        "ID": entity_id(tx),
        "User": tx.get("user_id", ""),
        "Date": str(tx.get("date") or "")[:10],
        "Amount": format_currency(tx.get("amount")),
        "Type": tx.get("type", ""),
        "Category": tx.get("category_name") or "N/A",
        "Description": tx.get("description") or tx.get("note") or "",
    } for tx in transactions]
    st.dataframe(pd.DataFrame(display_data), use_container_width=True, hide_index=True)

    st.subheader("📈 Transaction Insights")
    summary = build_report(transactions)["summary"]
    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_currency(summary["income"]))
    col2.metric("Expenses", format_currency(summary["expense"]))
    col3.metric("Net", format_currency(summary["balance"]))

    counts = pd.DataFrame({"Type": [INCOME, EXPENSE],
                           "Count": [sum(1 for tx in transactions if tx.get("type") == t)
                                     for t in (INCOME, EXPENSE)]})
    fig = px.bar(counts, x="Type", y="Count", color="Type")
    st.plotly_chart(fig, use_container_width=True)


def render_reports(store):
    st.header("📄 System Reports")
    fmt = st.selectbox("Format", list(EXPORT_FORMATS), key="admin_report_format")
    col1, col2 = st.columns(2)
    start = col1.date_input("From", value=None, key="admin_report_from")
    end = col2.date_input("To", value=None, key="admin_report_to")
    filters = {"start_date": start.isoformat() if start else None,
               "end_date": end.isoformat() if end else None}

    if st.button("Generate report", key="admin_report_btn"):
        with st.spinner("Generating report..."):
            st.session_state.admin_report = store.admin_stats.generate_report(
                fmt, {k: v for k, v in filters.items() if v})
    result = st.session_state.get("admin_report")
    if result is not None:
        if result.fallback:
            st.warning("Report service unavailable, this CSV was built from the loaded data.")
        st.download_button("Download", data=result.content, file_name=result.filename,
                           mime=result.mime_type, key="admin_report_download")
    show_feedback(store.admin_stats.state, store.admin_stats.clear_message)


def main():
    store = get_store()
    if store.auth.resolve_route(ADMIN_ROUTE, requires_admin=True) != ADMIN_ROUTE:
        render_login(store)
    else:
        render_dashboard(store)


if __name__ == "__main__":
    main()

#frontend/streamlit_app.py

import logging
from datetime import date

import pandas as pd
import streamlit as st

from budgetwise_client.config import DEFAULT_ROUTE, LOG_LEVEL
from budgetwise_client.frontend import charts
from budgetwise_client.models import EXPENSE, EXPORT_FORMATS, INCOME, entity_id, same_id
from budgetwise_client.store import Store
from budgetwise_client.store.auth import VERIFICATION_REQUIRED
from budgetwise_client.utils.errors import ValidationError
from budgetwise_client.utils.formatting import format_currency
from budgetwise_client.utils.reports import build_report, category_label, filter_transactions
from budgetwise_client.utils.storage import SessionStateStorage
from budgetwise_client.utils.validation import parse_date

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# ---------------- Page config ----------------
st.set_page_config(page_title="BudgetWise", layout="wide", page_icon="💸")

# ---------------- CSS ----------------
st.markdown("""
<style>
body, .block-container {
    background: linear-gradient(135deg, #f3e8ff, #e5d4ff);
    font-family: 'Segoe UI', sans-serif;
}
[data-testid="stSidebar"] {
    background: linear-gradient(180deg, #6b2cff, #8f5bff);
    color: white;
}
.stButton>button {
    background-color: #7c3aed !important;
    color: white !important;
    border-radius: 10px;
    border: none;
}
h1, h2, h3, h4 {
    color: #5b21b6 !important;
    font-weight: 700;
}
</style>
""", unsafe_allow_html=True)


# ---------------- Session State Management ----------------
def get_store():
    """One Store per browser session."""
    if "store" not in st.session_state:
        st.session_state.store = Store(storage=SessionStateStorage(st.session_state))
    return st.session_state.store


def show_feedback(state, clear=None):
    """Render a slice's error/message once, then clear it."""
    if state.error:
        st.error(f"❌ {state.error}")
    elif state.message:
        st.success(f"✅ {state.message}")
    if clear and (state.error or state.message):
        clear()


def show_validation(error):
    for field, message in error.errors.items():
        st.error(f"❌ {field.replace('_', ' ').capitalize()}: {message}")


def category_options(store, tx_type):
    return {c.get("name"): entity_id(c) for c in store.categories.of_type(tx_type)}


# ---------------- Authentication ----------------
def render_auth(store):
    auth = store.auth
    st.title("💰 BudgetWise")
    st.markdown("**Track income and expenses, see where the money goes**")

    params = st.query_params
    if params.get("verify_token"):
        render_verify_email(store, params.get("verify_token"))
        return
    if params.get("reset_token"):
        render_reset_password(store, params.get("reset_token"))
        return

    if auth.state.status == VERIFICATION_REQUIRED:
        render_verification_required(store)
        return

    action = st.radio("Action", ["Login", "Register", "Forgot password"], horizontal=True, key="auth_tab")
    if action == "Login":
        with st.form("login"):
            username = st.text_input("👤 Username or email")
            password = st.text_input("🔒 Password", type="password")
            if st.form_submit_button("Login", use_container_width=True):
                if username and password:
                    with st.spinner("Signing in..."):
                        if auth.login(username, password):
                            st.rerun()
                else:
                    st.warning("Please enter both username and password")
    elif action == "Register":
        with st.form("register"):
            col1, col2 = st.columns(2)
            with col1:
                first_name = st.text_input("First name")
                username = st.text_input("👤 Username")
                password = st.text_input("🔒 Password", type="password")
            with col2:
                last_name = st.text_input("Last name")
                email = st.text_input("📧 Email")
                confirm = st.text_input("🔒 Confirm password", type="password")
            if st.form_submit_button("Create account", use_container_width=True):
                try:
                    auth.register({
                        "first_name": first_name, "last_name": last_name, "username": username,
                        "email": email, "password": password, "confirm_password": confirm,
                    })
                except ValidationError as e:
                    show_validation(e)
    else:
        with st.form("forgot"):
            email = st.text_input("📧 Email")
            if st.form_submit_button("Send reset link", use_container_width=True):
                try:
                    auth.forgot_password(email)
                except ValidationError as e:
                    show_validation(e)

    show_feedback(auth.state, auth.clear_error if auth.state.error else auth.clear_message)


def render_verification_required(store):
    auth = store.auth
    st.warning("📧 Please verify your email address before logging in.")
    st.caption(f"We sent a verification link to **{auth.state.unverified_email}**")
    if st.button("Resend verification email", key="resend_verification"):
        try:
            auth.resend_verification()
        except ValidationError as e:
            show_validation(e)
    if st.button("Back to login", key="back_to_login"):
        auth.logout()
        st.rerun()
    show_feedback(auth.state)


def render_verify_email(store, token):
    auth = store.auth
    if "verify_outcome" not in st.session_state:
        with st.spinner("Verifying your email..."):
            st.session_state.verify_outcome = auth.verify_email(token)
    outcome = st.session_state.verify_outcome
    if outcome in ("verified", "already_verified", "token_used"):
        st.success(f"✅ {auth.state.message}")
    else:
        st.error(f"❌ {auth.state.error}")
    if st.button("Go to login", key="verified_login"):
        st.query_params.clear()
        st.session_state.pop("verify_outcome", None)
        auth.clear_redirect()
        st.rerun()


def render_reset_password(store, token):
    auth = store.auth
    st.subheader("🔑 Choose a new password")
    with st.form("reset_password"):
        password = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm new password", type="password")
        if st.form_submit_button("Reset password", use_container_width=True):
            try:
                if auth.reset_password(token, password, confirm):
                    st.query_params.clear()
            except ValidationError as e:
                show_validation(e)
    show_feedback(auth.state)


# ---------------- Sidebar ----------------
def render_sidebar(store):
    with st.sidebar:
        st.title("🔐 Account")
        user = store.auth.state.user or {}
        st.success(f"Logged in as **{user.get('username') or user.get('email', '')}**")
        if st.button("🚪 Logout", use_container_width=True, key="logout_btn"):
            store.logout()
            st.rerun()

        st.markdown("---")
        st.header("📊 Quick Insights")
        summary = build_report(store.transactions.state.items)["summary"]
        col1, col2 = st.columns(2)
        col1.metric("💰 Expenses", format_currency(summary["expense"]))
        col2.metric("💵 Income", format_currency(summary["income"]))


# ---------------- Dashboard Tab ----------------
def render_dashboard(store):
    st.header("📊 Dashboard Overview")
    if st.button("🔄 Refresh", key="refresh_dashboard"):
        store.transactions.fetch_transactions()
        store.transactions.fetch_recent()
        store.profile.fetch_dashboard_stats()

    report = build_report(store.transactions.state.items, store.categories.state.items)
    summary = report["summary"]

    st.subheader("💰 Financial Summary")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Income", format_currency(summary["income"]))
    col2.metric("Expenses", format_currency(summary["expense"]))
    col3.metric("Net Balance", format_currency(summary["balance"]))
    col4.metric("Transactions", summary["count"])

    st.subheader("🕒 Recent Transactions")
    recent = store.transactions.state.extras.get("recent") or []
    if recent:
        st.dataframe(transactions_table(recent, store.categories.state.items),
                     use_container_width=True, hide_index=True)
    else:
        st.info("No recent transactions")

    col1, col2 = st.columns([2, 1])
    with col1:
        fig = charts.category_pie(report["categories"])
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No expense data yet")
    with col2:
        fig = charts.income_vs_expense(summary)
        if fig:
            st.plotly_chart(fig, use_container_width=True)


def transactions_table(transactions, categories):
    rows = [{
        "Date": str(tx.get("date") or "")[:10],
        "Category": category_label(tx, categories),
        "Type": tx.get("type"),
        "Amount": format_currency(tx.get("amount")),
        "Note": tx.get("note") or "",
    } for tx in transactions]
    return pd.DataFrame(rows, columns=["Date", "Category", "Type", "Amount", "Note"])


# ---------------- Transactions Tab ----------------
def render_transactions(store):
    st.header("💳 Transaction Management")
    slice_ = store.transactions
    categories = store.categories.state.items

    with st.expander("➕ Add Transaction", expanded=False):
        t_type = st.selectbox("🔸 Type", [EXPENSE, INCOME], key="tx_type")
        options = category_options(store, t_type)
        with st.form("add_transaction", clear_on_submit=True):
            col_a, col_b = st.columns(2)
            with col_a:
                t_date = st.date_input("📅 Date", value=date.today(), max_value=date.today())
                t_amount = st.number_input("💰 Amount", min_value=0.0, format="%.2f", step=100.0)
            with col_b:
                t_cat = st.selectbox("📁 Category", list(options) or [""])
                t_note = st.text_input("📝 Note", placeholder="e.g., Netflix subscription")
            if st.form_submit_button("💾 Add Transaction", use_container_width=True):
                try:
                    if slice_.add_transaction({
                        "amount": t_amount, "type": t_type, "category_id": options.get(t_cat),
                        "date": t_date, "note": t_note,
                    }, categories) is not None:
                        slice_.fetch_transactions()
                except ValidationError as e:
                    show_validation(e)

    st.subheader("📋 Your Transactions")
    col1, col2, col3 = st.columns(3)
    with col1:
        search = st.text_input("🔍 Search", key="tx_search", on_change=on_search_change, args=(store,))
    with col2:
        type_filter = st.selectbox("Type", ["All", INCOME, EXPENSE], key="tx_type_filter")
    with col3:
        per_page = st.selectbox("Per page", [10, 25, 50], key="tx_per_page")

    if per_page != slice_.state.per_page:
        slice_.set_per_page(per_page)
    filters = {"search": search or None, "type": None if type_filter == "All" else type_filter}
    if st.button("🔄 Load", key="load_tx"):
        if search:
            search_debouncer(store).flush(filters)
        else:
            slice_.fetch_transactions(filters)

    visible = filter_transactions(slice_.state.items, search=search,
                                  tx_type=filters["type"])
    if visible:
        st.dataframe(transactions_table(visible, categories), use_container_width=True, hide_index=True)
        st.caption(f"Page {slice_.state.page} of {max(slice_.state.pages, 1)} · {slice_.state.total} transactions")
        render_transaction_actions(store, visible)
    else:
        st.info("💳 No transactions found. Add your first transaction above!")

    col_prev, col_next = st.columns(2)
    if col_prev.button("⬅️ Previous", disabled=slice_.state.page <= 1, key="tx_prev"):
        slice_.set_page(slice_.state.page - 1)
        slice_.fetch_transactions(filters)
    if col_next.button("Next ➡️", disabled=slice_.state.page >= slice_.state.pages, key="tx_next"):
        slice_.set_page(slice_.state.page + 1)
        slice_.fetch_transactions(filters)

    show_feedback(slice_.state, slice_.clear_message)


def search_debouncer(store):
    if "tx_search_debounced" not in st.session_state:
        st.session_state.tx_search_debounced = store.debounce(store.transactions.search)
    return st.session_state.tx_search_debounced


def on_search_change(store):
    """Typing waits for a pause before searching; clearing the box reloads the plain list."""
    search = st.session_state.get("tx_search")
    type_filter = st.session_state.get("tx_type_filter", "All")
    filters = {"search": search or None, "type": None if type_filter == "All" else type_filter}
    if search:
        search_debouncer(store)(filters)
    else:
        search_debouncer(store).cancel()
        store.transactions.fetch_transactions(filters)


def render_transaction_actions(store, visible):
    slice_ = store.transactions
    labels = {f"{str(tx.get('date'))[:10]} · {format_currency(tx.get('amount'))} · {tx.get('note') or ''}":
              entity_id(tx) for tx in visible}
    chosen = st.multiselect("Select transactions", list(labels), key="tx_selected")
    ids = [labels[label] for label in chosen]
    col1, col2 = st.columns(2)
    if col1.button("🗑️ Delete selected", disabled=not ids, key="tx_bulk_delete"):
        slice_.bulk_delete(ids)
    if col2.button("📄 Duplicate", disabled=len(ids) != 1, key="tx_duplicate"):
        if slice_.duplicate(ids[0]) is not None:
            slice_.fetch_transactions()

    if len(ids) == 1:
        selected = next(tx for tx in visible if entity_id(tx) == ids[0])
        render_edit_transaction(store, selected)


def render_edit_transaction(store, transaction):
    tx_id = entity_id(transaction)
    with st.expander("✏️ Edit transaction"):
        types = [EXPENSE, INCOME]
        t_type = st.selectbox("🔸 Type", types, key=f"edit_tx_type_{tx_id}",
                              index=types.index(transaction.get("type")) if transaction.get("type") in types else 0)
        options = category_options(store, t_type)
        names = list(options) or [""]
        current = next((name for name, cat_id in options.items()
                        if same_id(cat_id, transaction.get("category_id"))), None)
        with st.form(f"edit_transaction_{tx_id}"):
            col_a, col_b = st.columns(2)
            with col_a:
                t_date = st.date_input("📅 Date", value=parse_date(transaction.get("date")) or date.today(),
                                       max_value=date.today(), key=f"edit_tx_date_{tx_id}")
                t_amount = st.number_input("💰 Amount", min_value=0.0, format="%.2f", step=100.0,
                                           value=float(transaction.get("amount") or 0), key=f"edit_tx_amount_{tx_id}")
            with col_b:
                t_cat = st.selectbox("📁 Category", names, index=names.index(current) if current in names else 0,
                                     key=f"edit_tx_cat_{tx_id}")
                t_note = st.text_input("📝 Note", value=transaction.get("note") or "", key=f"edit_tx_note_{tx_id}")
            if st.form_submit_button("💾 Save changes", use_container_width=True):
                try:
                    store.transactions.update_transaction(tx_id, {
                        "amount": t_amount, "type": t_type, "category_id": options.get(t_cat),
                        "date": t_date, "note": t_note,
                    }, store.categories.state.items)
                except ValidationError as e:
                    show_validation(e)


# ---------------- Categories Tab ----------------
def render_categories(store):
    st.header("📁 Categories")
    slice_ = store.categories

    with st.form("add_category", clear_on_submit=True):
        col1, col2 = st.columns([2, 1])
        name = col1.text_input("Name")
        cat_type = col2.selectbox("Type", [EXPENSE, INCOME])
        if st.form_submit_button("➕ Add Category"):
            try:
                if slice_.add_category({"name": name, "type": cat_type}) is not None:
                    slice_.fetch_categories()
            except ValidationError as e:
                show_validation(e)

    col_income, col_expense = st.columns(2)
    for column, title, items in ((col_income, "💵 Income", slice_.income),
                                 (col_expense, "💸 Expense", slice_.expense)):
        with column:
            st.subheader(title)
            for category in items:
                cat_id = entity_id(category)
                row1, row2 = st.columns([3, 1])
                row1.write(f"{category.get('name')}{' (default)' if category.get('is_default') else ''}")
                if slice_.can_delete(category) and row2.button("🗑️", key=f"del_cat_{cat_id}"):
                    slice_.delete_category(cat_id)
                    st.rerun()

    if slice_.state.items:
        render_edit_category(slice_)

    show_feedback(slice_.state, slice_.clear_message)


def render_edit_category(slice_):
    with st.expander("✏️ Edit category"):
        labels = {f"{c.get('name')} ({c.get('type')})": c for c in slice_.state.items}
        category = labels[st.selectbox("Category", list(labels), key="edit_cat_choice")]
        cat_id = entity_id(category)
        types = [EXPENSE, INCOME]
        with st.form(f"edit_category_{cat_id}"):
            name = st.text_input("Name", value=category.get("name") or "", key=f"edit_cat_name_{cat_id}")
            cat_type = st.selectbox("Type", types, disabled=not slice_.can_change_type(category),
                                    key=f"edit_cat_type_{cat_id}",
                                    index=types.index(category.get("type")) if category.get("type") in types else 0)
            if not slice_.can_change_type(category):
                st.caption("Default categories keep their type.")
            if st.form_submit_button("💾 Save category"):
                try:
                    slice_.update_category(cat_id, {"name": name, "type": cat_type})
                except ValidationError as e:
                    show_validation(e)


# ---------------- Reports Tab ----------------
def render_reports(store):
    st.header("📈 Spending Reports & Analytics")
    transactions = store.transactions.state.items
    report = build_report(transactions, store.categories.state.items)

    if not transactions:
        st.info("📊 No transaction data for reporting")
    else:
        st.metric("Average transaction", format_currency(report["average"]))
        fig = charts.monthly_bar(report["monthly"])
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        fig = charts.daily_trend(report["daily"])
        if fig:
            st.plotly_chart(fig, use_container_width=True)
        fig = charts.category_bar(report["categories"])
        if fig:
            st.plotly_chart(fig, use_container_width=True)

    st.subheader("⬇️ Export")
    fmt = st.selectbox("Format", list(EXPORT_FORMATS), key="export_format")
    if st.button("Prepare export", key="export_btn"):
        with st.spinner("Exporting..."):
            st.session_state.export_result = store.transactions.export(fmt)
    result = st.session_state.get("export_result")
    if result is not None:
        if result.fallback:
            st.warning("Server export unavailable, this CSV was built from the loaded transactions.")
        st.download_button("Download", data=result.content, file_name=result.filename,
                           mime=result.mime_type, key="export_download")
    show_feedback(store.transactions.state, store.transactions.clear_message)


# ---------------- Profile Tab ----------------
def render_profile(store):
    st.header("👤 Profile")
    slice_ = store.profile
    profile = slice_.profile or store.auth.state.user or {}

    with st.form("profile"):
        first_name = st.text_input("First name", value=profile.get("first_name", ""))
        last_name = st.text_input("Last name", value=profile.get("last_name", ""))
        email = st.text_input("Email", value=profile.get("email", ""))
        if st.form_submit_button("💾 Save profile"):
            try:
                slice_.update_profile({"first_name": first_name, "last_name": last_name, "email": email})
            except ValidationError as e:
                show_validation(e)

    with st.expander("🔑 Change password"):
        with st.form("change_password", clear_on_submit=True):
            current = st.text_input("Current password", type="password")
            new = st.text_input("New password", type="password")
            confirm = st.text_input("Confirm new password", type="password")
            if st.form_submit_button("Change password"):
                try:
                    slice_.change_password({"current_password": current, "new_password": new,
                                            "confirm_password": confirm})
                except ValidationError as e:
                    show_validation(e)

    with st.expander("⚠️ Delete account"):
        password = st.text_input("Confirm with your password", type="password", key="delete_pw")
        if st.button("Delete my account", disabled=not password, key="delete_account"):
            slice_.delete_account(password)
            st.rerun()

    show_feedback(slice_.state, slice_.clear_message)


def load_initial_data(store):
    """First fetch after login; later refreshes are explicit."""
    if st.session_state.get("loaded_for") == store.auth.state.token:
        return
    with st.spinner("Loading your data..."):
        store.categories.fetch_categories()
        store.transactions.fetch_transactions()
        store.transactions.fetch_recent()
        store.profile.fetch_profile()
    st.session_state.loaded_for = store.auth.state.token


# ---------------- Main App ----------------
def main():
    store = get_store()
    if store.auth.resolve_route(DEFAULT_ROUTE) != DEFAULT_ROUTE:
        render_auth(store)
        return

    load_initial_data(store)
    st.title("💰 BudgetWise")
    render_sidebar(store)

    tab1, tab2, tab3, tab4, tab5 = st.tabs([
        "📊 Dashboard", "💳 Transactions", "📁 Categories", "📈 Reports", "👤 Profile"
    ])
    with tab1:
        render_dashboard(store)
    with tab2:
        render_transactions(store)
    with tab3:
        render_categories(store)
    with tab4:
        render_reports(store)
    with tab5:
        render_profile(store)


if __name__ == "__main__":
    main()

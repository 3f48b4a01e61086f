import streamlit as st
import os
import requests
from dotenv import load_dotenv
import logging
from typing import Any, Dict, List

# Load environment variables at the very top
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Configuration ---
# Use environment variables for the backend URL, with a local fallback.
FASTAPI_BASE_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")
LOGIN_ENDPOINT = f"{FASTAPI_BASE_URL}/api/auth/login"
CAMPAIGNS_ENDPOINT = f"{FASTAPI_BASE_URL}/api/campaigns"
LEADS_ENDPOINT = f"{FASTAPI_BASE_URL}/api/leads"
MESSAGE_ENDPOINT = f"{FASTAPI_BASE_URL}/api/personalized-message"

STATUS_BADGES = {"ACTIVE": "🟢 ACTIVE", "INACTIVE": "⚪ INACTIVE", "DELETED": "🔴 DELETED"}

# Page setup
st.set_page_config(page_title="Campaign Manager", layout="wide")

st.markdown("## 📣 Campaign Manager")
st.markdown("Manage outreach campaigns, browse scraped leads and draft personalized messages.")

# --- Session State Initialization ---
if 'logged_in' not in st.session_state:
    st.session_state.logged_in = False
if 'email' not in st.session_state:
    st.session_state.email = None
if 'access_token' not in st.session_state:
    st.session_state.access_token = None
if 'editing_campaign' not in st.session_state:
    st.session_state.editing_campaign = None


# --- API helpers ---

def _auth_headers() -> Dict[str, str]:
    if st.session_state.access_token:
        return {"Authorization": f"Bearer {st.session_state.access_token}"}
    return {}

def _show_api_error(action: str, response: requests.Response | None, exc: Exception):
    """Render the backend's {error, type, details} envelope when there is one."""
    st.error(f"{action} failed: {exc}")
    if response is None or not response.content:
        return
    try:
        body = response.json()
        st.error(f"{body.get('type', 'ERROR')}: {body.get('error')}")
        if body.get("details"):
            st.caption(str(body["details"]))
    except ValueError:
        st.error(response.text)
    if response.status_code == 401:
        st.warning("Your session has expired or is invalid. Please log in again.")
        logout()

def api_request(method: str, url: str, action: str, **kwargs) -> Dict[str, Any] | None:
    response = None
    try:
        response = requests.request(method, url, headers=_auth_headers(), timeout=15, **kwargs)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"{action} failed: {e}")
        _show_api_error(action, response, e)
        return None

def login_user(email: str, password: str) -> Dict[str, Any] | None:
    """FastAPI's OAuth2PasswordRequestForm expects form-data, not JSON."""
    response = None
    try:
        response = requests.post(LOGIN_ENDPOINT, data={"username": email, "password": password}, timeout=15)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _show_api_error("Login", response, e)
        return None

def logout():
    st.session_state.logged_in = False
    st.session_state.email = None
    st.session_state.access_token = None

def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


# --- Campaigns ---

def campaign_form(campaign: Dict[str, Any] | None = None):
    is_editing = campaign is not None
    campaign = campaign or {}
    with st.form("campaign_form", clear_on_submit=not is_editing):
        st.subheader("Edit Campaign" if is_editing else "Create Campaign")
        name = st.text_input("Name", value=campaign.get("name", ""))
        description = st.text_area("Description", value=campaign.get("description", ""))
        status_options = ["ACTIVE", "INACTIVE"]
        current = campaign.get("status", "ACTIVE")
        status = st.radio("Status", status_options, index=status_options.index(current) if current in status_options else 0, horizontal=True)
        leads = st.text_area("Leads (one LinkedIn URL per line)", value="\n".join(campaign.get("leads", [])))
        accounts = st.text_area("Account IDs (one per line)", value="\n".join(campaign.get("accountIDs", [])))
        submitted = st.form_submit_button("Update Campaign" if is_editing else "Create Campaign")

    if submitted:
        if not name.strip() or not description.strip():
            st.error("Name and description are required.")
            return
        payload = {
            "name": name,
            "description": description,
            "status": status,
            "leads": _lines(leads),
            "accountIDs": _lines(accounts),
        }
        if is_editing:
            result = api_request("PUT", f"{CAMPAIGNS_ENDPOINT}/{campaign['_id']}", "Update campaign", json=payload)
        else:
            result = api_request("POST", CAMPAIGNS_ENDPOINT, "Create campaign", json=payload)
        if result:
            st.session_state.editing_campaign = None
            st.success("Campaign saved.")
            st.rerun()

def show_campaigns_tab():
    col_filter, col_refresh = st.columns([3, 1])
    with col_filter:
        status_filter = st.selectbox("Status filter", ["All", "ACTIVE", "INACTIVE", "DELETED"])
    with col_refresh:
        st.button("🔄 Refresh")

    params = {} if status_filter == "All" else {"status": status_filter}
    page = api_request("GET", CAMPAIGNS_ENDPOINT, "Fetch campaigns", params=params)
    campaigns = page.get("items", []) if page else []
    if page:
        st.caption(f"{page['total']} campaign(s)")

    if not campaigns:
        st.info("No campaigns found. Create your first campaign to get started.")

    for campaign in campaigns:
        with st.container(border=True):
            st.markdown(f"### {campaign['name']}  {STATUS_BADGES.get(campaign['status'], campaign['status'])}")
            st.write(campaign["description"])
            st.caption(f"{len(campaign['leads'])} lead(s) · {len(campaign['accountIDs'])} account(s)")
            if campaign["status"] == "DELETED":
                continue
            toggle_col, edit_col, delete_col = st.columns(3)
            new_status = "INACTIVE" if campaign["status"] == "ACTIVE" else "ACTIVE"
            if toggle_col.button(f"Set {new_status}", key=f"toggle_{campaign['_id']}"):
                if api_request("PUT", f"{CAMPAIGNS_ENDPOINT}/{campaign['_id']}", "Update status", json={"status": new_status}):
                    st.rerun()
            if edit_col.button("✏️ Edit", key=f"edit_{campaign['_id']}"):
                st.session_state.editing_campaign = campaign
                st.rerun()
            if delete_col.button("🗑️ Delete", key=f"delete_{campaign['_id']}"):
                if api_request("DELETE", f"{CAMPAIGNS_ENDPOINT}/{campaign['_id']}", "Delete campaign"):
                    st.success("Campaign deleted successfully")
                    st.rerun()

    st.markdown("---")
    campaign_form(st.session_state.editing_campaign)


# --- Leads & messages ---

def show_leads_tab():
    search = st.text_input("Search by name, company, title or location")
    page = api_request("GET", LEADS_ENDPOINT, "Fetch profiles", params={"search": search})
    profiles = page.get("items", []) if page else []
    if page:
        st.caption(f"{page['total']} profile(s)")
    for profile in profiles:
        with st.expander(f"{profile['name']} · {profile['job_title']} at {profile['company']}"):
            st.write(profile["location"])
            st.write(profile["summary"])
            if profile.get("profile_url"):
                st.markdown(f"[LinkedIn profile]({profile['profile_url']})")

def show_message_tab():
    with st.form("message_form"):
        name = st.text_input("Name")
        job_title = st.text_input("Job title")
        company = st.text_input("Company")
        location = st.text_input("Location")
        summary = st.text_area("Summary")
        submitted = st.form_submit_button("✨ Generate Message")

    if submitted:
        profile = {"name": name, "job_title": job_title, "company": company, "location": location, "summary": summary}
        with st.spinner("Generating message..."):
            result = api_request("POST", MESSAGE_ENDPOINT, "Generate message", json=profile)
        if result:
            st.text_area("Personalized message", value=result["message"], height=300)


# --- UI Functions for Login ---

def show_login_form():
    st.title("Welcome to Campaign Manager")
    st.markdown("Please log in to manage your campaigns.")
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

    if submitted:
        if email and password:
            with st.spinner("Logging in..."):
                login_result = login_user(email, password)
            if login_result and "access_token" in login_result:
                st.session_state.logged_in = True
                st.session_state.email = email
                st.session_state.access_token = login_result["access_token"]
                st.rerun()
            else:
                st.error("Login failed. Please check your email and password.")
        else:
            st.error("Please enter both email and password.")

def show_authenticated_content():
    with st.sidebar:
        st.header(f"Hello, {st.session_state.email}!")
        st.button("Logout", on_click=logout)

    campaigns_tab, leads_tab, message_tab = st.tabs(["📋 Campaigns", "👥 Leads", "✉️ Message Generator"])
    with campaigns_tab:
        show_campaigns_tab()
    with leads_tab:
        show_leads_tab()
    with message_tab:
        show_message_tab()


# --- Main Application Logic (Conditional Rendering) ---
if st.session_state.logged_in:
    show_authenticated_content()
else:
    show_login_form()

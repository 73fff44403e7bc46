"""
Streamlit-based web UI for Conveo Insights.

Run with:
    streamlit run ui_app.py
"""

from typing import List, Optional

import requests
import streamlit as st

from conveo_insights.config import settings
from conveo_insights.credentials import KeyStoreCredentialProvider
from conveo_insights.prompts import PromptMode


API_BASE = settings.api_base_url


def _error_detail(resp: requests.Response) -> str:
    try:
        return resp.json().get("detail") or resp.text
    except ValueError:
        return resp.text


def fetch_studies() -> List[dict]:
    resp = requests.get(f"{API_BASE}/studies", timeout=30)
    resp.raise_for_status()
    return resp.json()


def fetch_study(study_id: str) -> Optional[dict]:
    resp = requests.get(f"{API_BASE}/studies/{study_id}", timeout=30)
    if resp.status_code == 404:
        return None
    resp.raise_for_status()
    return resp.json()


def validate_key(api_key: str) -> str:
    """Return an error message, or an empty string when the key is valid."""
    resp = requests.post(
        f"{API_BASE}/credentials/validate", json={"api_key": api_key}, timeout=60
    )
    if resp.ok:
        return ""
    return _error_detail(resp)


def generate_insights(
    study_id: str, api_key: Optional[str], snippet: str, mode: str, objective: str
) -> requests.Response:
    headers = {"X-OpenAI-Key": api_key} if api_key else {}
    return requests.post(
        f"{API_BASE}/studies/{study_id}/insights",
        json={"snippet": snippet, "mode": mode, "objective": objective or None},
        headers=headers,
        timeout=120,
    )


def render_key_panel(keys: KeyStoreCredentialProvider) -> None:
    st.subheader("OpenAI API key")
    st.caption(
        "Paste your OpenAI API key. It is kept only in this browser session and "
        "sent with each request; it is not stored on the server."
    )
    # Filled once the form has been handled.
    status = st.empty()

    with st.form("key_form"):
        key_input = st.text_input(
            "API key", value=keys.get_api_key() or "", type="password", placeholder="sk-..."
        )
        col1, col2 = st.columns(2)
        with col1:
            save = st.form_submit_button("Validate & Save")
        with col2:
            clear = st.form_submit_button("Clear from browser")
    st.markdown("[Get an API key](https://platform.openai.com/api-keys)")

    if clear:
        keys.clear()
        st.success("Key cleared from this browser.")
    elif save:
        handle_key_save(keys, key_input)

    status.write("OpenAI key is set and ready." if keys.get_api_key() else "No API key set yet.")


def handle_key_save(keys: KeyStoreCredentialProvider, key_input: str) -> None:
    with st.spinner("Validating key..."):
        try:
            error = validate_key(key_input.strip())
        except requests.RequestException as exc:
            st.error(f"Could not reach the backend: {exc}")
            return
    if error:
        st.error(error)
        return
    keys.save(key_input)
    st.success("API key validated and saved in your browser.")


def render_home(keys: KeyStoreCredentialProvider) -> None:
    render_key_panel(keys)

    st.header("Conveo Mini – AI Studies")
    st.write("Select a study, paste an interview snippet, and generate instant AI insights.")

    try:
        studies = fetch_studies()
    except requests.RequestException as exc:
        st.error(f"Failed to load studies: {exc}")
        return

    cols = st.columns(2)
    for idx, study in enumerate(studies):
        with cols[idx % 2]:
            with st.container(border=True):
                st.markdown(f"**{study['title']}**")
                st.caption(f"Persona: {study['persona']}")
                st.write(study["description"])
                if st.button("Open study", key=f"open-{study['id']}"):
                    st.query_params["study"] = study["id"]
                    st.rerun()


def render_study(study_id: str, keys: KeyStoreCredentialProvider) -> None:
    if st.button("← Back to studies"):
        del st.query_params["study"]
        st.rerun()

    try:
        study = fetch_study(study_id)
    except requests.RequestException as exc:
        st.error(f"Failed to load study: {exc}")
        return
    if study is None:
        st.error("Study not found")
        return

    st.title(study["title"])
    st.caption(f"Persona: {study['persona']}")
    st.write(study["description"])

    left, right = st.columns(2)
    with left:
        st.subheader("Interview snippet")
        st.caption("Paste a short excerpt from a customer interview.")
        with st.form("snippet_form"):
            mode = st.selectbox("Prompt mode", [m.value for m in PromptMode])
            objective = st.text_input("Research objective", value=study["description"])
            snippet = st.text_area(
                "Snippet",
                height=180,
                placeholder="“I love the product, but the checkout always times out on mobile…”",
            )
            submitted = st.form_submit_button("Generate insights")

    with right:
        st.subheader("AI insights")
        st.caption("Summary and key themes extracted from the snippet.")

        if not submitted:
            st.info("Insights will appear here after you submit a snippet.")
            return

        with st.spinner("Analyzing interview snippet..."):
            try:
                resp = generate_insights(study_id, keys.get_api_key(), snippet, mode, objective)
            except requests.RequestException as exc:
                st.error(f"Failed to generate insights: {exc}")
                return

        if not resp.ok:
            st.error(_error_detail(resp))
            return

        insights = resp.json()
        st.write(insights["summary"])
        for theme in insights["themes"]:
            if theme["description"]:
                st.markdown(f"- **{theme['title']}** – {theme['description']}")
            else:
                st.markdown(f"- {theme['title']}")


def main() -> None:
    st.set_page_config(page_title="Conveo Mini – Studies", layout="wide")
    keys = KeyStoreCredentialProvider(st.session_state)

    study_id = st.query_params.get("study")
    if study_id:
        render_study(study_id, keys)
    else:
        render_home(keys)


if __name__ == "__main__":
    main()

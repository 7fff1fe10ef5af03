"""Streamlit frontend for docfill.

Collects folders, form values and style choices, runs the batch and shows
the summary and a text preview of the first filled document.
"""

import logging

import streamlit as st

from docfill.core.factory import ComponentFactory
from docfill.core.logging_config import setup_logging
from docfill.core.preferences import Preferences, PreferenceStore
from docfill.schemas import INSTANCE_COUNT, FormData, InstanceData, ProcessingRequest
from docfill.strategies.template_engine import StyleOverride
from docfill.worker import (
    PREVIEW_PLACEHOLDER,
    BackgroundRunner,
    DocumentProcessor,
    ProcessingState,
    ProcessingStatus,
)

FONT_CHOICES = ["", "Times New Roman", "Arial", "Calibri", "Cambria", "Courier New"]

# Page config
st.set_page_config(
    page_title="Document Filler",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded",
)


logger = logging.getLogger(__name__)


@st.cache_resource
def get_factory() -> ComponentFactory:
    """Build the shared factory once per server process."""
    factory = ComponentFactory()
    setup_logging(factory.settings)
    return factory


@st.cache_resource
def get_runner() -> BackgroundRunner:
    """One background worker shared by all sessions, so batches never overlap."""
    return BackgroundRunner(DocumentProcessor(get_factory()))


# =============================================================================
# UI Components
# =============================================================================


def render_sidebar(store: PreferenceStore, prefs: Preferences) -> tuple[str, str, str, StyleOverride]:
    """Render folder inputs and style toggles, saving every change.

    Returns:
        Template folder, output folder, output file name and style override.
    """
    with st.sidebar:
        st.title("📄 Document Filler")

        st.divider()

        st.subheader("Folders")
        template_dir = st.text_input("Template folder", value=prefs.template_dir)
        output_dir = st.text_input("Output folder", value=prefs.output_dir)
        output_file_name = st.text_input(
            "Output file name",
            value=prefs.output_file_name,
            help="Used for the first template in the template folder itself; .docx is added if missing",
        )

        st.divider()

        st.subheader("Style of filled values")
        bold = st.checkbox("Bold", value=prefs.style.bold)
        italic = st.checkbox("Italic", value=prefs.style.italic)
        current_font = prefs.style.font_family or ""
        options = FONT_CHOICES if current_font in FONT_CHOICES else FONT_CHOICES + [current_font]
        font_family = st.selectbox(
            "Font",
            options=options,
            index=options.index(current_font),
            format_func=lambda name: name or "Keep template font",
        )

    style = StyleOverride(bold=bold, italic=italic, font_family=font_family)
    changed = (
        template_dir != prefs.template_dir
        or output_dir != prefs.output_dir
        or output_file_name != prefs.output_file_name
        or style != prefs.style
    )
    if changed:
        try:
            store.update(
                template_dir=template_dir,
                output_dir=output_dir,
                output_file_name=output_file_name,
                style=style,
            )
        except OSError as e:
            logger.error(f"Could not save preferences: {e}")
            st.warning(f"Could not save preferences: {e}")

    return template_dir, output_dir, output_file_name, style


def render_form() -> FormData:
    """Render the data entry form."""
    st.subheader("📝 Document data")

    object_desc = st.text_area("Object description")

    col1, col2 = st.columns(2)
    with col1:
        sub_contractor = st.text_input("Sub-contractor")
        sub_contractor_name = st.text_input("Sub-contractor representative")
        sub_contractor_co = st.text_input("Sub-contractor company")
        contractor = st.text_input("Contractor")
        contractor_name = st.text_input("Contractor representative")
        contractor_co = st.text_input("Contractor company")
        certification = st.text_input("Certification")
    with col2:
        design_org = st.text_input("Design organization")
        design_org_name = st.text_input("Design organization representative")
        design_co = st.text_input("Design company")
        customer = st.text_input("Customer")
        customer_name = st.text_input("Customer representative")
        customer_co = st.text_input("Customer company")
        design_doc = st.text_input("Design documentation")

    st.subheader("Objects")
    instances = []
    for index in range(INSTANCE_COUNT):
        name_col, number_col = st.columns([3, 1])
        with name_col:
            object_name = st.text_input(f"Object {index + 1} name", key=f"object_name_{index}")
        with number_col:
            sr_num = st.text_input(f"Project No. {index + 1}", key=f"sr_num_{index}")
        instances.append(InstanceData(object_name=object_name, sr_num=sr_num))

    return FormData(
        object_desc=object_desc,
        sub_contractor=sub_contractor,
        sub_contractor_name=sub_contractor_name,
        contractor=contractor,
        contractor_name=contractor_name,
        design_org=design_org,
        design_org_name=design_org_name,
        customer=customer,
        customer_name=customer_name,
        certification=certification,
        design_doc=design_doc,
        sub_contractor_co=sub_contractor_co,
        contractor_co=contractor_co,
        design_co=design_co,
        customer_co=customer_co,
        instances=instances,
    )


def render_result(state: ProcessingState) -> None:
    """Render the status message and preview pane."""
    if state.status == ProcessingStatus.SUCCESS:
        st.success(state.message)
    elif state.status == ProcessingStatus.ERROR:
        st.error(state.message)

    st.subheader("👁️ Preview")
    if state.preview_file_name:
        st.caption(state.preview_file_name)
    st.text_area("Preview", value=state.preview_text, height=500, disabled=True, label_visibility="collapsed")


def main() -> None:
    """Main application entry point."""
    factory = get_factory()
    store = factory.get_preference_store()
    prefs = store.load()

    template_dir, output_dir, output_file_name, style = render_sidebar(store, prefs)

    form_col, preview_col = st.columns([1, 1])
    with form_col:
        form = render_form()
        fill_button = st.button("Fill documents", type="primary", use_container_width=True)

    if fill_button:
        request = ProcessingRequest(
            template_dir=template_dir,
            output_dir=output_dir,
            output_file_name=output_file_name,
            form=form,
            style=style,
        )
        runner = get_runner()
        if runner.busy:
            st.warning("Another batch is still running. Try again when it has finished.")
        else:
            future = runner.submit(request)
            with st.spinner("Processing documents..."):
                st.session_state["processing_state"] = future.result()

    state = st.session_state.get("processing_state") or ProcessingState(preview_text=PREVIEW_PLACEHOLDER)
    with preview_col:
        render_result(state)


if __name__ == "__main__":
    main()

"""
Streamlit Frontend for Expense Mascots

The mascot picker and the navigation strip.

DESIGN PRINCIPLES:
1. The picker always shows a valid selection (defaults if needed)
2. Clear feedback when a limit blocks a change
3. The navigation strip refreshes only when the picker says so

Sign-in is handled elsewhere; the sidebar user id stands in for it.
"""

import asyncio
from typing import Optional

import streamlit as st

from expense_mascots.catalog import get_groups_with_images
from expense_mascots.config import get_settings, validate_all_settings
from expense_mascots.events import CATEGORY_PREFERENCES_UPDATED, ChangeNotificationBus
from expense_mascots.models.catalog import CatalogItem
from expense_mascots.navigation import NavMascotsAdapter
from expense_mascots.orchestrator import MascotEditorSession, create_app_components
from expense_mascots.preferences import PreferenceService, static_identity


# Page configuration
st.set_page_config(
    page_title="Expense Mascots",
    page_icon="🐉",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> tuple[PreferenceService, ChangeNotificationBus]:
    """Get or create application components (cached for the process)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


def get_surfaces(
    service: PreferenceService,
    bus: ChangeNotificationBus,
    user_id: Optional[str],
) -> tuple[MascotEditorSession, NavMascotsAdapter]:
    """One editor and one nav adapter per signed-in user."""
    if st.session_state.get("surfaces_user") != user_id or "editor" not in st.session_state:
        old_nav = st.session_state.get("nav")
        if old_nav is not None:
            old_nav.close()

        identity = static_identity(user_id)
        editor = MascotEditorSession(service, bus, identity)
        run_async(editor.load())

        st.session_state.editor = editor
        st.session_state.nav = NavMascotsAdapter(
            service, bus, identity, limit=get_settings().selection.nav_display_limit
        )
        st.session_state.surfaces_user = user_id

    return st.session_state.editor, st.session_state.nav


def apply_change(editor: MascotEditorSession, action: str, identifier: str) -> None:
    """Apply a select/remove and let its background save finish."""
    async def _run():
        if action == "select":
            result = editor.select_image(identifier)
        else:
            result = editor.remove_image(identifier)
        await editor.wait_for_pending_saves()
        return result

    result = run_async(_run())

    if result.changed:
        st.session_state.flash = None
    elif action == "select" and editor.is_max_reached():
        summary = editor.get_selection_summary()
        st.session_state.flash = f"You can select at most {summary.max} mascots."
    elif action == "remove" and editor.is_min_reached():
        summary = editor.get_selection_summary()
        st.session_state.flash = f"You must keep at least {summary.min} mascots."


def render_nav(nav: NavMascotsAdapter) -> None:
    """Navigation strip, read through the adapter's cache."""
    st.sidebar.markdown("**Quick add**")
    mascots: list[CatalogItem] = run_async(nav.get_mascots())
    cols = st.sidebar.columns(2)
    for idx, mascot in enumerate(mascots):
        cols[idx % 2].button(mascot.name, key=f"nav-{mascot.identifier}", disabled=True)


def render_picker(editor: MascotEditorSession) -> None:
    summary = editor.get_selection_summary()

    st.title("🐉 Category Mascots")
    st.caption(
        f"{summary.current} selected · pick between {summary.min} and {summary.max}"
    )

    if not editor.is_persistable:
        st.info("Sign in to keep your mascots. Changes now last for this visit only.")

    if st.session_state.get("flash"):
        st.warning(st.session_state.flash)

    st.subheader("Your mascots")
    selected = editor.get_selected_images()
    cols = st.columns(5)
    for idx, image in enumerate(selected):
        with cols[idx % 5]:
            st.markdown(f"**{image.name}**  \n{image.group.value}")
            if st.button("Remove", key=f"remove-{image.identifier}"):
                apply_change(editor, "remove", image.identifier)
                st.rerun()

    st.markdown("---")

    for group in get_groups_with_images():
        alternatives = editor.get_alternative_images(group)
        if not alternatives:
            continue
        st.subheader(group.value)
        cols = st.columns(5)
        for idx, image in enumerate(alternatives):
            with cols[idx % 5]:
                if st.button(image.name, key=f"select-{image.identifier}"):
                    apply_change(editor, "select", image.identifier)
                    st.rerun()


def render_status(service: PreferenceService) -> None:
    """Connection status for the configured store."""
    app_settings = get_settings().app
    status = validate_all_settings()

    with st.sidebar.expander("⚙️ Status"):
        st.caption(f"Environment: {app_settings.app_environment}")

        backend = app_settings.storage_backend
        if backend == "memory":
            st.info("💾 In-memory store - preferences reset on restart")
        elif status.get(backend, False):
            st.success(f"✅ {backend} - Configured")
        else:
            error = status.get(f"{backend}_error", "Not configured")
            st.error(f"❌ {backend} - {error}")

        if app_settings.debug_mode:
            st.markdown("**Recent audit events**")
            for event in reversed(service.audit_logger.recent_events[-10:]):
                st.text(f"{event.severity.value:7} {event.event_type.value}: {event.description}")


def main():
    """Main application entry point."""
    service, bus = get_components()

    st.sidebar.title("🐉 Expense Mascots")
    render_status(service)
    user_id = st.sidebar.text_input("Signed in as (user id)", value="").strip() or None

    if user_id and st.sidebar.button("Reset to defaults"):
        result = run_async(service.reset_category_mascot_preferences(user_id))
        if result.success:
            # Reload the editor from the store on the next run
            st.session_state.pop("editor", None)
            bus.publish(CATEGORY_PREFERENCES_UPDATED)
            st.rerun()
        else:
            st.sidebar.error(result.error)

    st.sidebar.markdown("---")

    editor, nav = get_surfaces(service, bus, user_id)
    render_nav(nav)
    render_picker(editor)


if __name__ == "__main__":
    main()

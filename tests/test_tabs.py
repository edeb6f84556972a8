import pytest

from quire.core.errors import OpenFailed
from quire.core.tabs import TabManager


def _manager_with(source, *paths: str) -> TabManager:
    tabs = TabManager()
    for path in paths:
        tabs.open_new(path, source)
    return tabs


THREE = ("/docs/report.pdf", "/docs/slides.pdf", "/docs/notes.pdf")


def test_empty_manager_has_no_active_tab() -> None:
    tabs = TabManager()

    assert len(tabs) == 0
    assert tabs.active_index is None
    assert tabs.active is None


def test_open_new_appends_and_activates(source) -> None:
    tabs = _manager_with(source, "/docs/report.pdf", "/docs/slides.pdf")

    assert len(tabs) == 2
    assert tabs.active_index == 1
    assert tabs.active.display_name() == "slides.pdf"


def test_failed_open_leaves_state_unchanged(source) -> None:
    tabs = _manager_with(source, "/docs/report.pdf")

    with pytest.raises(OpenFailed):
        tabs.open_new("/docs/missing.pdf", source)

    assert len(tabs) == 1
    assert tabs.active_index == 0


def test_closing_active_last_tab_clamps_active_index(source) -> None:
    tabs = _manager_with(source, *THREE)
    assert tabs.active_index == 2

    tabs.close(2)

    assert len(tabs) == 2
    assert tabs.active_index == 1
    assert tabs.active.display_name() == "slides.pdf"


def test_closing_tab_before_active_shifts_active_index(source) -> None:
    tabs = _manager_with(source, *THREE)

    tabs.close(0)

    assert tabs.active_index == 1
    assert tabs.active.display_name() == "notes.pdf"


def test_closing_active_middle_tab_activates_right_neighbour(source) -> None:
    tabs = _manager_with(source, *THREE)
    tabs.select(1)

    tabs.close(1)

    assert tabs.active_index == 1
    assert tabs.active.display_name() == "notes.pdf"


def test_closing_tab_after_active_keeps_active_index(source) -> None:
    tabs = _manager_with(source, *THREE)
    tabs.select(0)

    tabs.close(2)

    assert tabs.active_index == 0
    assert tabs.active.display_name() == "report.pdf"


def test_closing_last_remaining_tab_clears_active(source) -> None:
    tabs = _manager_with(source, "/docs/report.pdf")
    renderer = tabs.active.renderer

    tabs.close(0)

    assert len(tabs) == 0
    assert tabs.active_index is None
    assert renderer.closed


@pytest.mark.parametrize("index", [-1, 3, 42])
def test_close_out_of_range_is_a_noop(source, index) -> None:
    tabs = _manager_with(source, *THREE)

    tabs.close(index)

    assert len(tabs) == 3
    assert tabs.active_index == 2


def test_select(source) -> None:
    tabs = _manager_with(source, *THREE)

    tabs.select(0)
    assert tabs.active_index == 0

    tabs.select(3)
    tabs.select(-1)
    assert tabs.active_index == 0


def test_commands_route_to_active_session(source) -> None:
    tabs = _manager_with(source, "/docs/report.pdf", "/docs/slides.pdf")

    assert tabs.set_page(4)
    assert tabs.zoom_in()
    assert tabs.pan(10.0, 20.0)

    slides, report = tabs[1], tabs[0]
    assert slides.viewport.current_page == 4
    assert slides.viewport.zoom == 1.25
    assert slides.viewport.pan_position == (10.0, 20.0)
    assert report.viewport.current_page == 0
    assert report.viewport.zoom == 1.0


def test_each_tab_keeps_its_own_view(source) -> None:
    tabs = _manager_with(source, "/docs/report.pdf", "/docs/slides.pdf")
    tabs.next_page()
    tabs.select(0)
    tabs.zoom_out()
    tabs.select(1)

    assert tabs.active.viewport.current_page == 1
    assert tabs.active.viewport.zoom == 1.0
    assert tabs[0].viewport.zoom == 0.75


def test_commands_are_noops_without_tabs() -> None:
    tabs = TabManager()

    assert tabs.set_page(1) is False
    assert tabs.next_page() is False
    assert tabs.previous_page() is False
    assert tabs.zoom_in() is False
    assert tabs.zoom_out() is False
    assert tabs.set_zoom(2.0) is False
    assert tabs.reset_zoom() is False
    assert tabs.pan(1.0, 1.0) is False
    assert tabs.rendered_page() is None


def test_rendered_page_of_active_tab(source) -> None:
    tabs = _manager_with(source, "/docs/report.pdf")
    tabs.set_zoom(2.0)

    image = tabs.rendered_page()

    assert image is not None
    assert image.zoom_bucket == 200


def test_add_activates_session_opened_elsewhere(source) -> None:
    from quire.core.session import DocumentSession

    tabs = _manager_with(source, "/docs/report.pdf")
    session = DocumentSession.open("/docs/notes.pdf", source)

    index = tabs.add(session)

    assert index == 1
    assert tabs.active is session


def test_manager_cache_settings_apply_to_new_sessions(source) -> None:
    tabs = TabManager(cache_capacity=2)

    session = tabs.open_new("/docs/report.pdf", source)

    assert session.cache.capacity == 2


def test_close_all(source) -> None:
    tabs = _manager_with(source, *THREE)
    renderers = [s.renderer for s in tabs]

    tabs.close_all()

    assert len(tabs) == 0
    assert tabs.active is None
    assert all(r.closed for r in renderers)

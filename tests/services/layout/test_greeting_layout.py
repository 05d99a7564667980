"""Measure-then-place behaviour of the flowing greeting sheet."""

from __future__ import annotations

from datetime import date

import pytest

from birthdayflow.services.layout.greetings import (
    GreetingGeometry,
    LayoutBlock,
    LayoutCursor,
    header_text,
    measure_block,
    needs_page_break,
    place_block,
    render_greetings,
)

GEOMETRY = GreetingGeometry(
    page_size=(800.0, 500.0),
    margin_top=50.0,
    margin_bottom=50.0,
    margin_left=40.0,
    margin_right=40.0,
    column_gap=20.0,
    header_gap=10.0,
    trailing_gap=20.0,
)


def _block(content: float, header: float = 20.0) -> LayoutBlock:
    return LayoutBlock(header, content, content / 2, GEOMETRY.header_gap, GEOMETRY.trailing_gap)


def test_geometry_columns() -> None:
    assert GEOMETRY.usable_width == 720.0
    assert GEOMETRY.column_width == 350.0
    assert GEOMETRY.max_y == 450.0


def test_block_height_uses_taller_column() -> None:
    block = LayoutBlock(header_height=20, verse_height=40, greeting_height=90, header_gap=10, trailing_gap=20)
    assert block.content_height == 90
    assert block.height == 140


def test_place_block_keeps_cursor_when_block_fits() -> None:
    cursor = LayoutCursor(y=100.0)
    assert place_block(cursor, _block(300.0), GEOMETRY) is cursor


def test_place_block_breaks_when_block_would_cross_bottom() -> None:
    cursor = LayoutCursor(y=100.0, page=2)
    target = place_block(cursor, _block(320.0), GEOMETRY)
    assert target == LayoutCursor(y=GEOMETRY.margin_top, page=3)


def test_no_break_at_top_of_page_for_oversized_block() -> None:
    cursor = LayoutCursor(y=GEOMETRY.margin_top)
    assert not needs_page_break(cursor, _block(1000.0), GEOMETRY)


def test_measure_block_queries_all_three_texts(stub_backend, enriched_factory) -> None:
    record = enriched_factory(verse="V", greeting="G")
    stub_backend.heights.update({"V": 30.0, "G": 55.0, header_text(record): 15.0})
    block = measure_block(stub_backend, record, GEOMETRY)
    assert (block.header_height, block.verse_height, block.greeting_height) == (15.0, 30.0, 55.0)
    assert stub_backend.draws == []


def test_second_record_moves_to_new_page(stub_backend, enriched_factory) -> None:
    first = enriched_factory("First", verse="v1", greeting="g1")
    second = enriched_factory("Second", verse="v2", greeting="g2")
    stub_backend.heights.update(
        {header_text(first): 20.0, header_text(second): 20.0, "v1": 200.0, "g1": 150.0, "v2": 100.0, "g2": 180.0}
    )

    placed = render_greetings(stub_backend, [first, second], GEOMETRY)

    assert [p.page for p in placed] == [1, 2]
    assert placed[0].top == GEOMETRY.margin_top
    assert placed[0].bottom == 50.0 + 20.0 + 10.0 + 200.0
    assert placed[1].top == GEOMETRY.margin_top
    assert stub_backend.page == 2
    assert all(call.bottom <= GEOMETRY.max_y for call in stub_backend.draws)


def test_records_share_page_while_they_fit(stub_backend, enriched_factory) -> None:
    records = [enriched_factory(f"P{i}", verse=f"v{i}", greeting=f"g{i}") for i in range(5)]
    for i, record in enumerate(records):
        stub_backend.heights.update({header_text(record): 20.0, f"v{i}": 40.0, f"g{i}": 60.0})

    placed = render_greetings(stub_backend, records, GEOMETRY)

    # Each block needs 20 + 10 + 60 + 20 = 110pt; 400pt usable fit three per page.
    assert [p.page for p in placed] == [1, 1, 1, 2, 2]
    assert [p.top for p in placed] == [50.0, 160.0, 270.0, 50.0, 160.0]
    assert all(call.bottom <= GEOMETRY.max_y for call in stub_backend.draws)


def test_columns_start_at_same_height(stub_backend, enriched_factory) -> None:
    record = enriched_factory(verse="left", greeting="right")
    stub_backend.heights.update({header_text(record): 25.0, "left": 80.0, "right": 30.0})

    render_greetings(stub_backend, [record], GEOMETRY)

    header, verse, greeting = stub_backend.draws
    assert header.x == verse.x == GEOMETRY.margin_left
    assert greeting.x == GEOMETRY.margin_left + GEOMETRY.column_width + GEOMETRY.column_gap
    assert verse.top == greeting.top == header.top + 25.0 + GEOMETRY.header_gap


@pytest.mark.parametrize("count", [1, 7, 25])
def test_variable_content_never_crosses_bottom_margin(stub_backend, enriched_factory, count: int) -> None:
    records = [
        enriched_factory(f"R{i}", verse="x" * (i % 4 + 1), greeting="y" * (i % 3 + 1)) for i in range(count)
    ]
    stub_backend.default_height = lambda text, style: 20.0 if text[0] not in "xy" else 45.0 * len(text)

    placed = render_greetings(stub_backend, records, GEOMETRY)

    assert len(placed) == count
    pages = [p.page for p in placed]
    assert pages == sorted(pages)
    assert all(call.bottom <= GEOMETRY.max_y for call in stub_backend.draws)


def test_header_text_contains_name_and_date(enriched_factory) -> None:
    record = enriched_factory("Anna Muster", celebration=date(2026, 6, 3))
    assert header_text(record) == "Anna Muster – 03.06.2026"

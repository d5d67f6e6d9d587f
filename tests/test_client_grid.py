# File: /tests/test_client_grid.py | Version: 1.0 | Title: Client grid against the API (pages, stale responses, optimistic edits, views)
import pytest

from conftest import OWNER_ID
from gridbase.client import Grid, GridApiClient, GridApiError
from gridbase.client.editing import parse_editor_value
from gridbase.client.indexes import IndexAdvisoryCache
from gridbase.models.grid import ColumnType
from gridbase.schemas.query import NumberFilter, RowQuery, Sort, TextFilter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def api(client):
    return GridApiClient(client, OWNER_ID)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def seeded(grid, add_rows):
    add_rows(
        grid.table,
        [
            {grid.name.id: "Alpha", grid.amount.id: 10},
            {grid.name.id: "Beta"},
            {grid.name.id: "Gamma", grid.amount.id: 5},
        ],
    )
    return grid


def _indexes(g: Grid):
    return [r.row_index for r in g.rows]


def test_open_and_load_more(api, seeded, clock):
    g = Grid(api, seeded.table.id, limit=2, clock=clock)
    g.open()
    assert [c.name for c in g.columns] == ["Name", "Amount"]
    assert _indexes(g) == [1, 2]
    assert g.total_count == 3
    assert g.window.has_next_page

    assert g.load_more() is True
    assert _indexes(g) == [1, 2, 3]
    assert not g.window.has_next_page
    assert g.load_more() is False


def test_open_adopts_first_saved_view(api, client, seeded, clock):
    config = {"sort": {"column_id": seeded.amount.id, "direction": "desc", "type": "NUMBER"}}
    client.post(
        f"/tables/{seeded.table.id}/views",
        json={"name": "By amount", "config": config},
        headers={"X-Owner-Id": OWNER_ID},
    )
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    assert g.session.active_view_id == g.views[0].id
    assert not g.session.is_dirty
    assert _indexes(g) == [2, 1, 3]
    assert g.indexes.requested == {seeded.amount.id}


def test_search_applies_after_debounce(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    g.set_search("gam")
    assert g.refresh() is False
    assert _indexes(g) == [1, 2, 3]

    clock.now = 1.0
    assert g.refresh() is True
    assert _indexes(g) == [3]
    assert g.total_count == 1


def test_stale_page_is_discarded(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    g.set_filters([TextFilter(column_id=seeded.name.id, op="contains", value="a")])
    request = g.window.next_request()
    page = api.query_rows(seeded.table.id, request.query)

    # config moves on before the response lands
    g.set_filters([NumberFilter(column_id=seeded.amount.id, op="gt", value=6)])
    assert g.window.receive(request, page) is False
    assert g.rows == []

    assert g.refresh() is True
    assert _indexes(g) == [1]


def test_out_of_sequence_page_is_discarded(api, seeded, clock):
    g = Grid(api, seeded.table.id, limit=1, clock=clock)
    g.open()
    request = g.window.next_request()
    page = api.query_rows(seeded.table.id, request.query)
    assert g.window.receive(request, page) is True
    # same request delivered twice
    assert g.window.receive(request, page) is False
    assert _indexes(g) == [1, 2]


def test_sort_advises_indexes_once_per_column(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    asc = Sort(column_id=seeded.amount.id, direction="asc", type=ColumnType.NUMBER)
    g.set_sort(asc)
    g.set_sort(asc.model_copy(update={"direction": "desc"}))
    g.set_sort(None)
    assert g.indexes.requested == {seeded.amount.id}


def test_index_advisory_failures_are_swallowed(caplog):
    class FailingApi:
        calls = 0

        def ensure_indexes(self, table_id, column_id):
            FailingApi.calls += 1
            raise GridApiError(500, "boom")

    cache = IndexAdvisoryCache(FailingApi(), "t")
    assert cache.advise("c") is True
    assert cache.advise("c") is False
    assert FailingApi.calls == 1
    assert "boom" in caplog.text


def test_commit_edit_patches_without_refetch(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    row = g.rows[1]
    g.session.start_editing(row.id, seeded.amount.id, "42")
    summary = g.commit_edit()

    assert summary.cells[seeded.amount.id] == 42
    assert g.window.find_row(row.id).cells[seeded.amount.id] == 42
    assert g.session.editing_cell is None
    # nothing was editing any more
    assert g.commit_edit() is None


def test_clearing_a_cell_removes_it_locally(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    row = g.rows[0]
    g.session.start_editing(row.id, seeded.name.id, "   ")
    g.commit_edit()
    assert seeded.name.id not in g.window.find_row(row.id).cells


def test_failed_edit_rolls_back(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    row = g.rows[0]
    before = dict(row.cells)

    with pytest.raises(GridApiError) as exc:
        g.editor.apply(row.id, seeded.amount.id, "not a number")
    assert exc.value.status_code == 400
    assert g.window.find_row(row.id).cells == before


def test_edit_under_filter_refetches_window(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    g.set_filters([NumberFilter(column_id=seeded.amount.id, op="gt", value=6)])
    g.refresh()
    assert _indexes(g) == [1]

    g.editor.apply(g.rows[0].id, seeded.amount.id, 1)
    assert g.rows == []
    assert g.total_count == 0


def test_save_view_clears_dirty(api, client, seeded, clock):
    client.post(
        f"/tables/{seeded.table.id}/views", json={"name": "Main"}, headers={"X-Owner-Id": OWNER_ID}
    )
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    g.set_search("beta")
    g.toggle_hidden_column(seeded.amount.id)
    assert g.session.is_dirty
    assert [c.id for c in g.visible_columns()] == [seeded.name.id]

    saved = g.save_view()
    assert saved.config.search == "beta"
    assert saved.config.hidden_column_ids == [seeded.amount.id]
    assert not g.session.is_dirty

    reloaded = api.list_views(seeded.table.id)[0]
    assert reloaded.config.search == "beta"


def test_save_without_active_view_is_noop(api, seeded, clock):
    g = Grid(api, seeded.table.id, clock=clock)
    g.open()
    g.set_search("x")
    assert g.save_view() is None
    assert g.session.is_dirty


def test_api_errors_carry_status(api):
    with pytest.raises(GridApiError) as exc:
        api.list_columns("missing")
    assert exc.value.is_not_found
    assert exc.value.message == "Table not found"


@pytest.mark.parametrize(
    "raw,column_type,expected",
    [
        ("", ColumnType.TEXT, None),
        ("  ", ColumnType.NUMBER, None),
        ("hi", ColumnType.TEXT, "hi"),
        ("3", ColumnType.NUMBER, 3),
        ("2.5", ColumnType.NUMBER, 2.5),
        ("abc", ColumnType.NUMBER, None),
        ("inf", ColumnType.NUMBER, None),
    ],
)
def test_parse_editor_value(raw, column_type, expected):
    assert parse_editor_value(raw, column_type) == expected


def test_bulk_generate_through_client(api, grid):
    out = api.bulk_generate(grid.table.id, 4)
    assert (out.start_row_index, out.count) == (1, 4)
    page = api.query_rows(grid.table.id, RowQuery(limit=10))
    assert [r.row_index for r in page.items] == [1, 2, 3, 4]
    assert page.total_count == 4

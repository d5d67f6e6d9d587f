# File: /tests/test_columns_api.py | Version: 1.0 | Title: Columns API (ordered create, list, ensure-indexes)
from sqlalchemy import text

from gridbase.crud.indexes import index_base_name


def _index_names(db_session, table_id: str, column_id: str) -> set:
    prefix = index_base_name(table_id, column_id)
    rows = db_session.execute(
        text("SELECT name FROM sqlite_master WHERE type = 'index' AND name LIKE :p"),
        {"p": f"{prefix}%"},
    ).scalars()
    return set(rows)


def test_columns_get_increasing_order(client, headers, grid):
    tid = grid.table.id
    r = client.post(f"/tables/{tid}/columns", json={"name": "Notes", "type": "TEXT"}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["order"] == 2
    assert r.json()["type"] == "TEXT"

    listed = client.get(f"/tables/{tid}/columns", headers=headers).json()
    assert [c["name"] for c in listed] == ["Name", "Amount", "Notes"]
    assert [c["order"] for c in listed] == [0, 1, 2]


def test_column_validation(client, headers, grid):
    url = f"/tables/{grid.table.id}/columns"
    assert client.post(url, json={"name": "", "type": "TEXT"}, headers=headers).status_code == 422
    assert client.post(url, json={"name": "D", "type": "DATE"}, headers=headers).status_code == 422


def test_ensure_indexes_creates_expression_indexes_once(client, headers, grid, db_session, index_advisor):
    tid = grid.table.id
    url = f"/tables/{tid}/columns/{grid.amount.id}/ensure-indexes"

    r = client.post(url, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    names = _index_names(db_session, tid, grid.amount.id)
    assert names == {f"{index_base_name(tid, grid.amount.id)}_n_b"}

    # second call is a no-op for the advisor and still succeeds
    assert client.post(url, headers=headers).json() == {"ok": True}
    assert _index_names(db_session, tid, grid.amount.id) == names
    assert (tid, grid.amount.id) in index_advisor.ensured


def test_ensure_indexes_text_column(client, headers, grid, db_session):
    tid = grid.table.id
    client.post(f"/tables/{tid}/columns/{grid.name.id}/ensure-indexes", headers=headers)
    # the trigram index is PostgreSQL-only
    assert _index_names(db_session, tid, grid.name.id) == {f"{index_base_name(tid, grid.name.id)}_t_b"}


def test_ensure_indexes_unknown_column(client, headers, grid):
    r = client.post(f"/tables/{grid.table.id}/columns/missing/ensure-indexes", headers=headers)
    assert r.status_code == 404


def test_sorted_query_advises_indexes(client, headers, grid, add_rows, db_session, index_advisor):
    add_rows(grid.table, [{grid.amount.id: 1}])
    tid = grid.table.id
    r = client.post(
        f"/tables/{tid}/rows/query",
        json={
            "sort": {"column_id": grid.amount.id, "direction": "asc", "type": "NUMBER"},
            "filters": [{"column_id": grid.name.id, "op": "is_empty"}],
        },
        headers=headers,
    )
    assert r.status_code == 200
    assert index_advisor.ensured == {(tid, grid.amount.id), (tid, grid.name.id)}
    assert _index_names(db_session, tid, grid.amount.id)


def test_columns_are_owner_scoped(client, grid):
    r = client.get(f"/tables/{grid.table.id}/columns", headers={"X-Owner-Id": "x"})
    assert r.status_code == 404

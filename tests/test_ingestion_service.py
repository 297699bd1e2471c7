from __future__ import annotations

import pytest

from conftest import make_record
from lottostats.errors import IngestionError, QueryError, ValidationError
from lottostats.services.ingestion_service import IngestionMode, IngestionService
from lottostats.store import DrawStore

DRAWS = [
    make_record(3, [7, 14, 21, 28, 35, 42], bonus=1, jackpot="30000000.50", draw_date="08/01/2024"),
    make_record(2, [2, 11, 19, 26, 33, 40], bonus=5, jackpot="20000000", draw_date="04/01/2024"),
    make_record(1, [1, 2, 3, 4, 5, 6], bonus=9, jackpot="10000000", draw_date="01/01/2024"),
]


@pytest.fixture
def service() -> IngestionService:
    return IngestionService()


def test_insert_new_only_stores_every_row(store: DrawStore, service: IngestionService, write_csv) -> None:
    result = service.insert_new_only(store, write_csv(DRAWS))

    assert result.mode is IngestionMode.INSERT_NEW_ONLY
    assert (result.total_rows, result.inserted, result.skipped) == (3, 3, 0)
    assert store.list_draws(limit=10) == DRAWS


def test_insert_new_only_is_idempotent(store: DrawStore, service: IngestionService, write_csv) -> None:
    path = write_csv(DRAWS)
    service.insert_new_only(store, path)

    second = service.insert_new_only(store, path)

    assert (second.inserted, second.skipped) == (0, 3)
    assert store.count_draws() == 3


def test_existing_draws_are_never_overwritten(store: DrawStore, service: IngestionService, seed, write_csv) -> None:
    original = make_record(2, [10, 20, 30, 40, 50, 60], bonus=3, jackpot="5", draw_date="old")
    seed(original)

    result = service.insert_new_only(store, write_csv(DRAWS))

    assert (result.inserted, result.skipped) == (2, 1)
    stored = {d.draw_id: d for d in store.list_draws(limit=10)}
    assert stored[2] == original
    assert stored[1] == DRAWS[2]
    assert stored[3] == DRAWS[0]


def test_insert_new_only_creates_missing_table(engine, service: IngestionService, write_csv) -> None:
    with DrawStore(engine) as store:
        assert store.table_exists() is False
        service.insert_new_only(store, write_csv(DRAWS))
        assert store.count_draws() == 3


def test_repeated_id_in_source_keeps_first_row(store: DrawStore, service: IngestionService, write_csv) -> None:
    duplicate = make_record(1, [40, 41, 42, 43, 44, 45])
    result = service.insert_new_only(store, write_csv([DRAWS[2], duplicate]))

    assert (result.inserted, result.skipped) == (1, 1)
    assert store.list_draws(limit=10) == [DRAWS[2]]


def test_empty_source_inserts_nothing(store: DrawStore, service: IngestionService, write_csv) -> None:
    result = service.insert_new_only(store, write_csv([]))

    assert (result.total_rows, result.inserted, result.skipped) == (0, 0, 0)
    assert store.count_draws() == 0


def test_malformed_source_leaves_store_untouched(store: DrawStore, service: IngestionService, seed, write_csv) -> None:
    seed(DRAWS[0])
    bad = write_csv([DRAWS[1], "1,40,1,2,3,4,5,6,7,100,"])

    with pytest.raises(IngestionError):
        service.insert_new_only(store, bad)
    with pytest.raises(IngestionError):
        service.reload_all(store, bad)

    assert store.list_draws(limit=10) == [DRAWS[0]]


def test_failed_insert_rolls_back_whole_batch(
    store: DrawStore, service: IngestionService, write_csv, monkeypatch: pytest.MonkeyPatch
) -> None:
    real_insert = store.insert_draw
    calls = {"n": 0}

    def flaky_insert(record):  # type: ignore[no-untyped-def]
        calls["n"] += 1
        if calls["n"] == 2:
            raise QueryError(message="disk full")
        real_insert(record)

    monkeypatch.setattr(store, "insert_draw", flaky_insert)

    with pytest.raises(IngestionError) as exc_info:
        service.insert_new_only(store, write_csv(DRAWS))

    assert "disk full" in exc_info.value.message
    monkeypatch.undo()
    assert store.count_draws() == 0


def test_reload_all_replaces_previous_rows(store: DrawStore, service: IngestionService, seed, write_csv) -> None:
    seed(*(make_record(100 + i, [1, 2, 3, 4, 5, 6 + i]) for i in range(5)))

    result = service.reload_all(store, write_csv(DRAWS))

    assert result.mode is IngestionMode.RELOAD_ALL
    assert result.inserted == 3
    assert store.count_draws() == 3
    assert [d.draw_id for d in store.list_draws(limit=10)] == [3, 2, 1]


def test_failed_reload_keeps_prior_table(
    store: DrawStore, service: IngestionService, seed, write_csv, monkeypatch: pytest.MonkeyPatch
) -> None:
    previous = [make_record(100 + i, [1, 2, 3, 4, 5, 6 + i]) for i in range(4)]
    seed(*previous)

    def failing_insert(record):  # type: ignore[no-untyped-def]
        raise QueryError(message="constraint failed")

    monkeypatch.setattr(store, "insert_draw", failing_insert)
    with pytest.raises(IngestionError):
        service.reload_all(store, write_csv(DRAWS))
    monkeypatch.undo()

    assert store.table_exists() is True
    assert sorted(d.draw_id for d in store.list_draws(limit=10)) == [100, 101, 102, 103]


def test_run_dispatches_on_mode(store: DrawStore, service: IngestionService, seed, write_csv) -> None:
    seed(make_record(50, [1, 2, 3, 4, 5, 6]))
    path = write_csv(DRAWS)

    assert service.run(store, path, "insertNewOnly").inserted == 3
    assert store.count_draws() == 4
    assert service.run(store, path, IngestionMode.RELOAD_ALL).inserted == 3
    assert store.count_draws() == 3

    with pytest.raises(ValidationError):
        service.run(store, path, "appendSomehow")


def test_custom_reader_is_used(store: DrawStore) -> None:
    service = IngestionService(reader=lambda source: DRAWS[:1])

    result = service.insert_new_only(store, "ignored.csv")

    assert result.inserted == 1
    assert store.draw_exists(3)


def test_oversized_draw_id_fails_before_any_write(store: DrawStore, service: IngestionService, seed, write_csv) -> None:
    seed(DRAWS[2])
    path = write_csv([DRAWS[0], "99999999999999999999,40,1,2,3,4,5,6,7,100,01/02/2024"])

    with pytest.raises(IngestionError):
        service.insert_new_only(store, path)

    assert store.list_draws(limit=10) == [DRAWS[2]]


def test_overflow_at_insert_rolls_back_as_ingestion_error(store: DrawStore) -> None:
    oversized = make_record(2**64, [1, 2, 3, 4, 5, 6])
    service = IngestionService(reader=lambda source: [DRAWS[0], oversized])

    with pytest.raises(IngestionError):
        service.reload_all(store, "ignored.csv")

    assert store.count_draws() == 0

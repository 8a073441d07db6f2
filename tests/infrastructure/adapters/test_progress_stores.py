import json

import pytest

from retenta.infrastructure.adapters.progress import (
    InMemoryProgressRepository,
    JsonFileProgressRepository,
)
from tests.factories import make_record


@pytest.fixture
def json_path(tmp_path):
    return tmp_path / "data" / "progress.json"


@pytest.mark.asyncio
async def test_memory_store_get_set_all():
    repo = InMemoryProgressRepository()
    record = make_record("es:gato")

    assert await repo.get("es:gato") is None

    await repo.set("es:gato", record)

    assert await repo.get("es:gato") == record
    assert await repo.all() == {"es:gato": record}


@pytest.mark.asyncio
async def test_memory_store_snapshot_is_a_copy():
    repo = InMemoryProgressRepository({"es:gato": make_record("es:gato")})

    snapshot = await repo.all()
    snapshot.clear()

    assert await repo.get("es:gato") is not None


@pytest.mark.asyncio
async def test_json_store_missing_file_is_empty(json_path):
    repo = JsonFileProgressRepository(json_path)

    assert await repo.all() == {}
    assert await repo.get("es:gato") is None


@pytest.mark.asyncio
async def test_json_store_persists_across_instances(json_path):
    record = make_record("es:gato", interval=3, repetitions=2, interactions={"hover": 1})

    await JsonFileProgressRepository(json_path).set("es:gato", record)

    reopened = JsonFileProgressRepository(json_path)
    assert await reopened.get("es:gato") == record


@pytest.mark.asyncio
async def test_json_store_writes_camel_case_document(json_path):
    repo = JsonFileProgressRepository(json_path)
    await repo.set("es:gato", make_record("es:gato"))
    await repo.set("es:perro", make_record("es:perro"))

    data = json.loads(json_path.read_text(encoding="utf-8"))

    assert list(data) == ["es:gato", "es:perro"]
    assert data["es:gato"]["easeFactor"] == 2.5
    assert "ease_factor" not in data["es:gato"]
    # no stray temp files left behind
    assert [p.name for p in json_path.parent.iterdir()] == ["progress.json"]


@pytest.mark.asyncio
async def test_json_store_overwrites_existing_key(json_path):
    repo = JsonFileProgressRepository(json_path)
    await repo.set("es:gato", make_record("es:gato", interval=1))
    await repo.set("es:gato", make_record("es:gato", interval=8))

    assert (await repo.get("es:gato")).interval == 8
    assert len(await repo.all()) == 1


@pytest.mark.asyncio
async def test_json_store_rejects_corrupt_file(json_path):
    json_path.parent.mkdir(parents=True)
    json_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="Corrupt progress file"):
        await JsonFileProgressRepository(json_path).all()


@pytest.mark.asyncio
async def test_json_store_rejects_non_object(json_path):
    json_path.parent.mkdir(parents=True)
    json_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        await JsonFileProgressRepository(json_path).all()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "stored",
    [
        {"interval": 5, "repetitions": -1, "totalSeen": 3, "correctCount": 2},
        {"interval": 3, "repetitions": 2, "totalSeen": 1, "correctCount": 9},
        {"easeFactor": -1.0},
    ],
)
async def test_json_store_rejects_inconsistent_record(json_path, stored):
    json_path.parent.mkdir(parents=True)
    json_path.write_text(json.dumps({"es:gato": stored}), encoding="utf-8")
    repo = JsonFileProgressRepository(json_path)

    with pytest.raises(ValueError, match="Corrupt progress file .*es:gato"):
        await repo.get("es:gato")

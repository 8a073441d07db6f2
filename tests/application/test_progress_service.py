from datetime import timezone

import pytest

from retenta.application.progress_service import ProgressService
from retenta.application.scheduler import InvalidInputError
from retenta.domain.progress.models import InteractionKind
from retenta.infrastructure.adapters.progress import InMemoryProgressRepository
from tests.factories import DAY, NOW, make_record


@pytest.fixture
def repo():
    return InMemoryProgressRepository()


@pytest.fixture
def service(repo, clock, rng):
    return ProgressService(repo, clock=clock, rng=rng, tz=timezone.utc)


@pytest.mark.asyncio
async def test_review_persists_under_language_key(service, repo):
    record = await service.review("Casa", "ES", 5)

    assert record.item == "es:casa"
    assert record.interval == 1
    assert record.last_seen == NOW
    assert await repo.get("es:casa") == record


@pytest.mark.asyncio
async def test_consecutive_reviews_build_on_stored_record(service, repo, clock):
    await service.review("casa", "es", 5)
    clock.advance(DAY)
    second = await service.review("casa", "es", 5)

    assert second.repetitions == 2
    assert second.interval == 3
    assert second.total_seen == 2


@pytest.mark.asyncio
async def test_invalid_quality_leaves_store_untouched(service, repo):
    await repo.set("es:casa", make_record("es:casa"))

    with pytest.raises(InvalidInputError):
        await service.review("casa", "es", 9)

    assert await repo.get("es:casa") == make_record("es:casa")


@pytest.mark.asyncio
async def test_blank_word_is_rejected(service):
    with pytest.raises(InvalidInputError):
        await service.review("  ", "es", 4)


@pytest.mark.asyncio
async def test_hover_counts_as_failed_recall(service):
    record = await service.record_interaction("hola", "es", "hover")

    assert record.repetitions == 0
    assert record.interval == 1
    assert record.correct_count == 0
    assert record.total_seen == 1
    assert record.interactions == {"hover": 1}


@pytest.mark.asyncio
async def test_interaction_counters_accumulate(service, repo):
    await service.record_interaction("hola", "es", "hover")
    await service.record_interaction("hola", "es", InteractionKind.PRONUNCIATION)
    record = await service.record_interaction("hola", "es", "HOVER")

    assert record.interactions == {"hover": 2, "pronunciation": 1}
    assert record.total_seen == 3
    assert (await repo.get("es:hola")).interactions == record.interactions


@pytest.mark.asyncio
async def test_click_counts_as_success(service):
    record = await service.record_interaction("hola", "es", InteractionKind.CLICKED)

    assert record.correct_count == 1
    assert record.repetitions == 1


@pytest.mark.asyncio
async def test_unknown_interaction_kind_is_scored_but_not_counted(service, repo):
    for i in range(5):
        await service.record_interaction("hola", "es", f"scroll-{i}")

    record = await repo.get("es:hola")
    assert record.interactions == {}
    assert record.total_seen == 5
    assert record.correct_count == 5


@pytest.mark.asyncio
async def test_review_refuses_inconsistent_stored_record(service, repo):
    broken = make_record("es:casa", total_seen=1, correct_count=9)
    await repo.set("es:casa", broken)

    with pytest.raises(InvalidInputError, match="correct_count"):
        await service.review("casa", "es", 5)

    assert await repo.get("es:casa") == broken


@pytest.mark.asyncio
async def test_select_for_page_prefers_due_words_of_the_language(service, repo):
    await repo.set("es:gato", make_record("es:gato", next_review=NOW - DAY))
    await repo.set("es:mesa", make_record("es:mesa", next_review=NOW + DAY))
    await repo.set("en:dog", make_record("en:dog", next_review=NOW - DAY))

    chosen = await service.select_for_page("es", ["Gato", "perro", "dog", "mesa", ""])

    assert chosen[0] == "gato"
    assert sorted(chosen[1:]) == ["dog", "perro"]


@pytest.mark.asyncio
async def test_select_for_page_respects_budget(service):
    chosen = await service.select_for_page("es", ["uno", "dos", "tres", "cuatro"], budget=2)
    assert len(chosen) == 2


@pytest.mark.asyncio
async def test_due_becomes_non_empty_as_time_passes(service, clock):
    await service.review("casa", "es", 5)
    assert await service.due("es") == []

    clock.advance(2 * DAY)
    due = await service.due("es")

    assert [d.item for d in due] == ["casa"]
    assert due[0].overdue == DAY


@pytest.mark.asyncio
async def test_statistics_are_per_language(service):
    await service.review("casa", "es", 5)
    await service.review("gato", "es", 1)
    await service.review("house", "en", 5)

    stats = await service.statistics("es")

    assert stats.total_words == 2
    assert stats.today_reviews == 2
    assert stats.words_due_for_review == 0


@pytest.mark.asyncio
async def test_statistics_reject_blank_language(service):
    with pytest.raises(InvalidInputError):
        await service.statistics(" ")

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from retenta.application.config import resolve_config
from retenta.application.factory import get_progress_service
from retenta.application.progress_service import ProgressService
from retenta.application.scheduler import InvalidInputError
from retenta.consts import VERSION
from retenta.domain.progress.models import ProgressRecord

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("retenta.server")

_service: ProgressService | None = None


def get_service() -> ProgressService:
    """Lazily build the process-wide service from resolved config."""
    global _service
    if _service is None:
        _service = get_progress_service(resolve_config())
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Retenta Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("Retenta Server shutting down...")


app = FastAPI(
    title="Retenta Server",
    description="Background scheduling server for the vocabulary page annotator.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


class ReviewRequest(BaseModel):
    word: str = Field(min_length=1)
    language: str = Field(min_length=1)
    quality: int = Field(ge=0, le=5)


class InteractionRequest(BaseModel):
    word: str = Field(min_length=1)
    language: str = Field(min_length=1)
    kind: str


class SelectRequest(BaseModel):
    language: str = Field(min_length=1)
    words: list[str]
    budget: int | None = Field(default=None, ge=0)


class ProgressResponse(BaseModel):
    item: str
    easeFactor: float
    interval: int
    repetitions: int
    lastSeen: int
    nextReview: int
    totalSeen: int
    correctCount: int
    mastery: int
    interactions: dict[str, int]

    @classmethod
    def from_record(cls, record: ProgressRecord) -> "ProgressResponse":
        return cls(**record.to_dict())


class StatsResponse(BaseModel):
    totalWords: int
    masteredWords: int
    wordsInProgress: int
    wordsDueForReview: int
    averageMastery: float
    todayReviews: int


def _invalid(e: InvalidInputError) -> HTTPException:
    logger.warning(f"Rejected request: {e}")
    return HTTPException(status_code=422, detail=str(e))


@app.post("/review", response_model=ProgressResponse)
async def post_review(req: ReviewRequest, service: ProgressService = Depends(get_service)):
    """Record a review with an explicit quality rating."""
    try:
        record = await service.review(req.word, req.language, req.quality)
    except InvalidInputError as e:
        raise _invalid(e) from e
    except Exception as e:
        logger.error(f"Review failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return ProgressResponse.from_record(record)


@app.post("/interaction", response_model=ProgressResponse)
async def post_interaction(
    req: InteractionRequest, service: ProgressService = Depends(get_service)
):
    """Record a page interaction (hover, pronunciation, context, ignored, clicked)."""
    try:
        record = await service.record_interaction(req.word, req.language, req.kind)
    except InvalidInputError as e:
        raise _invalid(e) from e
    except Exception as e:
        logger.error(f"Interaction failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return ProgressResponse.from_record(record)


@app.post("/select")
async def post_select(req: SelectRequest, service: ProgressService = Depends(get_service)):
    """Choose which of the page's words to annotate."""
    try:
        words = await service.select_for_page(req.language, req.words, req.budget)
    except InvalidInputError as e:
        raise _invalid(e) from e
    except Exception as e:
        logger.error(f"Selection failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"words": words}


@app.get("/due")
async def get_due(
    language: str, limit: int | None = None, service: ProgressService = Depends(get_service)
):
    try:
        items = await service.due(language, limit)
    except InvalidInputError as e:
        raise _invalid(e) from e
    except Exception as e:
        logger.error(f"Due query failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"items": [{"word": d.item, "overdue": d.overdue} for d in items]}


@app.get("/stats", response_model=StatsResponse)
async def get_stats(language: str, service: ProgressService = Depends(get_service)):
    try:
        s = await service.statistics(language)
    except InvalidInputError as e:
        raise _invalid(e) from e
    except Exception as e:
        logger.error(f"Statistics failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return StatsResponse(
        totalWords=s.total_words,
        masteredWords=s.mastered_words,
        wordsInProgress=s.words_in_progress,
        wordsDueForReview=s.words_due_for_review,
        averageMastery=s.average_mastery,
        todayReviews=s.today_reviews,
    )

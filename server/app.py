"""FastAPI server for lexiclimb application."""

import asyncio
import logging
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

logger = logging.getLogger(__name__)

from core.models import WordEntry, Learner
from core.interfaces import Grader, Storage
from core.lexicon import load_lexicon_file, build_lexicon
from core.assessment import Assessment
from core.session import TrainingSession, AlwaysCorrectGrader
from core.scheduling import Debouncer
from core.config import MAX_DIFFICULTY, HARDEST_DECILE_BAND, DEFAULT_ASSESSMENT_BAND

from server.file_storage import FileStorage
from server.postgres_storage import PostgresStorage
from server.gemini_grader import GeminiGrader

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.environ.get('LEXICLIMB_DATA_DIR', PROJECT_ROOT / "data"))
GENERAL_FILE = 'vocab_data.json'
ACADEMIC_FILE = 'academic_vocab.json'


# Pydantic models for API
class UserRequest(BaseModel):
    user_id: str = "default"


class StartRoundRequest(BaseModel):
    user_id: str = "default"
    custom_words: Optional[str] = None  # Newline-separated words to restrict the lexicon to
    hardest_decile: bool = False        # Calibrate only against the hardest 10% of the lexicon


class AnswerRequest(BaseModel):
    user_id: str = "default"
    answer: Optional[str] = None


class DifficultyRequest(BaseModel):
    user_id: str = "default"
    difficulty: float


class RatingRequest(BaseModel):
    user_id: str = "default"
    score: int


class SettingsRequest(BaseModel):
    user_id: str = "default"
    difficulty: Optional[float] = None
    auto_remove_count: Optional[int] = None
    round_length: Optional[int] = None
    manual_difficulty: Optional[bool] = None
    do_assessment: Optional[bool] = None
    use_general: Optional[bool] = None
    use_academic: Optional[bool] = None
    remember_session: Optional[bool] = None


class SettingsResponse(BaseModel):
    difficulty: float
    auto_remove_count: int
    round_length: int
    manual_difficulty: bool
    do_assessment: bool
    use_general: bool
    use_academic: bool
    remember_session: bool


class RoundResponse(BaseModel):
    cursor: int
    total: int
    word: Optional[str]
    definition: Optional[str]
    revealed: bool
    difficulty: float
    reveal_count: int
    finished: bool
    starred: bool = False
    action: Optional[str] = None
    result: Optional[dict] = None  # {items, total, correct, summary} once finished


class AssessmentResponse(BaseModel):
    level: float
    cursor: int
    length: int
    responses: list[int]
    finished: bool
    current_word: Optional[str]


class StartRoundResponse(BaseModel):
    mode: str  # 'assessment' or 'training'
    assessment: Optional[AssessmentResponse] = None
    round: Optional[RoundResponse] = None


class StatusResponse(BaseModel):
    difficulty: float
    max_difficulty: int
    lexicon_size: int
    rounds_completed: int
    practice_count: int
    starred_count: int
    active_round: bool
    active_assessment: bool


# Global state (in production, use proper DI)
storage: Storage = None
grader: Grader = None
general_words: list[WordEntry] = []
academic_words: list[WordEntry] = []
user_learners: dict[str, Learner] = {}
user_lexicons: dict[str, list[WordEntry]] = {}
user_rounds: dict[str, TrainingSession] = {}
user_assessments: dict[str, Assessment] = {}
user_debouncers: dict[str, Debouncer] = {}


app = FastAPI(title="Lexiclimb API", description="Adaptive vocabulary trainer API")


def get_learner(user_id: str = "default") -> Learner:
    """Get or create learner state for a user."""
    if user_id not in user_learners:
        state = storage.load_state(user_id)
        if state:
            user_learners[user_id] = Learner.from_dict(state)
        else:
            user_learners[user_id] = Learner()
    return user_learners[user_id]


def save_learner(user_id: str = "default") -> None:
    """Persist learner state. Failures are logged and never reach the round in progress."""
    if user_id not in user_learners:
        return
    try:
        storage.save_state(user_learners[user_id].to_dict(), user_id)
    except Exception as e:
        logger.error(f"Failed to save state for {user_id}: {type(e).__name__}: {e}")


def get_round(user_id: str) -> TrainingSession:
    session = user_rounds.get(user_id)
    if session is None:
        raise HTTPException(status_code=400, detail="No active round")
    return session


def get_assessment(user_id: str) -> Assessment:
    assessment = user_assessments.get(user_id)
    if assessment is None:
        raise HTTPException(status_code=400, detail="No active assessment")
    return assessment


def get_debouncer(user_id: str) -> Debouncer:
    if user_id not in user_debouncers:
        user_debouncers[user_id] = Debouncer()
    return user_debouncers[user_id]


def round_response(user_id: str, session: TrainingSession, action: str = None) -> RoundResponse:
    data = session.to_dict()
    learner = get_learner(user_id)
    return RoundResponse(
        **data,
        starred=bool(data['word'] and learner.is_starred(data['word'])),
        action=action,
        result=session.result.to_dict() if session.result else None
    )


def assessment_response(assessment: Assessment) -> AssessmentResponse:
    return AssessmentResponse(**assessment.to_dict())


def start_training(user_id: str, seed_words: list[WordEntry] = ()) -> TrainingSession:
    """Start a training round, taking ownership of any calibration seed words."""
    learner = get_learner(user_id)
    get_debouncer(user_id).cancel()
    session = TrainingSession.start(
        user_lexicons.get(user_id, []),
        learner.settings,
        learner.correct_counts,
        seed_words=seed_words,
        grader=grader
    )
    user_rounds[user_id] = session
    logger.info(f"Round started for {user_id}: {len(session.word_list)} words at difficulty {session.difficulty}")
    if session.finished:
        finish_round(user_id)
    return session


def finish_round(user_id: str) -> dict:
    """Complete the active round and fold it into the learner's saved state."""
    session = get_round(user_id)
    already_recorded = session.result is not None and session.result is get_learner(user_id).last_result
    result = session.complete()
    get_debouncer(user_id).cancel()
    if not already_recorded:
        learner = get_learner(user_id)
        learner.record_round(result)
        save_learner(user_id)
        logger.info(f"Round complete for {user_id}: {result.correct}/{result.total}")
    return result.to_dict()


def load_source(name: str) -> list[WordEntry]:
    """Load one lexicon source. Comes back empty on failure."""
    path = DATA_DIR / name
    try:
        return load_lexicon_file(str(path))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load vocabulary data from {path}: {e}")
        return []


@app.on_event("startup")
async def startup():
    """Initialize storage, grader and lexicon sources on startup."""
    global storage, grader, general_words, academic_words

    # Use file storage by default, set LEXICLIMB_STORAGE=postgres to use PostgreSQL
    storage_type = os.environ.get('LEXICLIMB_STORAGE', 'file')
    if storage_type == 'postgres':
        storage = PostgresStorage()
        logger.info("Using PostgreSQL storage")
    else:
        storage = FileStorage()
        logger.info("Using file storage")

    # Both sources must be loaded before any sampling happens
    loop = asyncio.get_event_loop()
    general_words, academic_words = await asyncio.gather(
        loop.run_in_executor(None, load_source, GENERAL_FILE),
        loop.run_in_executor(None, load_source, ACADEMIC_FILE)
    )
    logger.info(f"Loaded {len(general_words)} general and {len(academic_words)} academic words.")

    # AI grading is optional; without a key every card moved past counts as known
    api_key = os.environ.get('GEMINI_API_KEY')
    if not api_key:
        try:
            config = storage.load_config()
            api_key = config.get('gemini_api_key')
        except FileNotFoundError:
            pass
    if api_key:
        grader = GeminiGrader(api_key)
        logger.info("Grader initialized: gemini-2.0-flash")
    else:
        grader = AlwaysCorrectGrader()
        logger.info("No GEMINI_API_KEY set, every reviewed word counts as correct")


@app.get("/")
async def root():
    """Service info, used by clients as a health check."""
    return {
        "service": "lexiclimb",
        "general_words": len(general_words),
        "academic_words": len(academic_words)
    }


# User Management Endpoints
@app.get("/api/users")
async def list_users():
    """List all existing users."""
    return {"users": storage.list_users()}


@app.delete("/api/users/{user_id}")
async def delete_user(user_id: str):
    """Delete a user and drop any in-memory state."""
    user_learners.pop(user_id, None)
    user_lexicons.pop(user_id, None)
    user_rounds.pop(user_id, None)
    user_assessments.pop(user_id, None)
    debouncer = user_debouncers.pop(user_id, None)
    if debouncer:
        debouncer.cancel()
    return {"success": storage.delete_user(user_id)}


@app.get("/api/status", response_model=StatusResponse)
async def get_status(user_id: str = "default"):
    """Get learner status and progress."""
    learner = get_learner(user_id)
    return StatusResponse(
        difficulty=learner.settings.difficulty,
        max_difficulty=MAX_DIFFICULTY,
        lexicon_size=len(user_lexicons.get(user_id, [])),
        rounds_completed=learner.rounds_completed,
        practice_count=len(learner.practice),
        starred_count=len(learner.starred),
        active_round=user_id in user_rounds and not user_rounds[user_id].finished,
        active_assessment=user_id in user_assessments
    )


@app.get("/api/settings", response_model=SettingsResponse)
async def get_settings(user_id: str = "default"):
    return SettingsResponse(**get_learner(user_id).settings.to_dict())


@app.post("/api/settings", response_model=SettingsResponse)
async def update_settings(request: SettingsRequest):
    """Update settings. Out-of-range values are clamped, not rejected."""
    learner = get_learner(request.user_id)
    changes = request.model_dump(exclude={'user_id'}, exclude_none=True)
    learner.settings.update(changes)
    save_learner(request.user_id)
    return SettingsResponse(**learner.settings.to_dict())


# Round Endpoints
@app.post("/api/round/start", response_model=StartRoundResponse)
async def start_round(request: StartRoundRequest):
    """Build the session lexicon and start either a calibration quiz or a training round."""
    user_id = request.user_id
    learner = get_learner(user_id)
    user_lexicons[user_id] = build_lexicon(
        general_words, academic_words, learner.settings, request.custom_words
    )
    user_rounds.pop(user_id, None)
    user_assessments.pop(user_id, None)

    if learner.settings.do_assessment:
        band = HARDEST_DECILE_BAND if request.hardest_decile else DEFAULT_ASSESSMENT_BAND
        assessment = Assessment(user_lexicons[user_id], learner.settings, band=band)
        if not assessment.finished:
            user_assessments[user_id] = assessment
            return StartRoundResponse(mode='assessment', assessment=assessment_response(assessment))

    session = start_training(user_id)
    return StartRoundResponse(mode='training', round=round_response(user_id, session))


@app.get("/api/round", response_model=RoundResponse)
async def get_current_round(user_id: str = "default"):
    return round_response(user_id, get_round(user_id))


@app.post("/api/round/reveal", response_model=RoundResponse)
async def reveal(request: UserRequest):
    session = get_round(request.user_id)
    session.reveal_definition()
    return round_response(request.user_id, session, 'revealed')


@app.post("/api/round/advance", response_model=RoundResponse)
async def advance(request: AnswerRequest):
    """Move past the current word. At the last word this completes the round instead."""
    session = get_round(request.user_id)
    try:
        if session.advance(request.answer):
            return round_response(request.user_id, session, 'advanced')
    except Exception as e:
        logger.error(f"Advance failed for {request.user_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Internal error: {type(e).__name__}: {str(e)}")
    finish_round(request.user_id)
    return round_response(request.user_id, session, 'complete')


@app.post("/api/round/retreat", response_model=RoundResponse)
async def retreat(request: UserRequest):
    session = get_round(request.user_id)
    session.retreat()
    return round_response(request.user_id, session, 'retreated')


@app.post("/api/round/step", response_model=RoundResponse)
async def step(request: AnswerRequest):
    """Flashcard key press: reveal, else advance, else finish."""
    session = get_round(request.user_id)
    action = session.step(request.answer)
    if action == 'complete':
        finish_round(request.user_id)
    return round_response(request.user_id, session, action)


@app.post("/api/round/complete", response_model=RoundResponse)
async def complete_round(request: UserRequest):
    session = get_round(request.user_id)
    finish_round(request.user_id)
    return round_response(request.user_id, session, 'complete')


@app.post("/api/round/star", response_model=RoundResponse)
async def toggle_star(request: UserRequest):
    session = get_round(request.user_id)
    learner = get_learner(request.user_id)
    if session.toggle_star(learner) is not None:
        save_learner(request.user_id)
    return round_response(request.user_id, session, 'starred')


@app.post("/api/round/difficulty")
async def set_round_difficulty(request: DifficultyRequest):
    """Slider input. Resampling waits until the slider has been still for a moment."""
    user_id = request.user_id
    get_round(user_id)

    def apply(difficulty: float) -> None:
        session = user_rounds.get(user_id)
        if session is None or session.finished:
            return
        session.set_difficulty(difficulty)
        get_learner(user_id).settings.difficulty = session.difficulty
        logger.info(f"Difficulty for {user_id} set to {session.difficulty}, rest of round resampled")

    get_debouncer(user_id).submit(apply, request.difficulty)
    return {"pending": True, "difficulty": request.difficulty}


# Assessment Endpoints
@app.get("/api/assessment", response_model=AssessmentResponse)
async def get_current_assessment(user_id: str = "default"):
    return assessment_response(get_assessment(user_id))


def _finish_assessment(user_id: str) -> StartRoundResponse:
    assessment = user_assessments.pop(user_id)
    seed_words = assessment.finish()
    save_learner(user_id)
    logger.info(f"Assessment finished for {user_id}: difficulty {assessment.final_difficulty}")
    session = start_training(user_id, seed_words)
    return StartRoundResponse(
        mode='training',
        assessment=assessment_response(assessment),
        round=round_response(user_id, session)
    )


@app.post("/api/assessment/rate", response_model=StartRoundResponse)
async def rate_word(request: RatingRequest):
    """Rate confidence 1-4 for the current quiz word. Hands over to training when done."""
    assessment = get_assessment(request.user_id)
    if assessment.rate(request.score):
        return _finish_assessment(request.user_id)
    return StartRoundResponse(mode='assessment', assessment=assessment_response(assessment))


@app.post("/api/assessment/skip", response_model=StartRoundResponse)
async def skip_assessment(request: UserRequest):
    assessment = get_assessment(request.user_id)
    assessment.skip()
    return _finish_assessment(request.user_id)


# Word Collection Endpoints
@app.get("/api/practice")
async def get_practice_words(user_id: str = "default"):
    """Words missed in earlier rounds."""
    learner = get_learner(user_id)
    words = [{'word': w, 'definition': d} for w, d in learner.practice.items()]
    return {"total": len(words), "words": words}


@app.delete("/api/practice/{word}")
async def remove_practice_word(word: str, user_id: str = "default"):
    learner = get_learner(user_id)
    removed = learner.remove_practice_word(word)
    if removed:
        save_learner(user_id)
    return {"removed": removed}


@app.get("/api/starred")
async def get_starred_words(user_id: str = "default"):
    learner = get_learner(user_id)
    words = [{'word': w, 'definition': d} for w, d in learner.starred.items()]
    return {"total": len(words), "words": words}


@app.get("/api/results/last")
async def get_last_result(user_id: str = "default"):
    """Last finished round, including the incorrect words as pasteable text."""
    learner = get_learner(user_id)
    if learner.last_result is None:
        raise HTTPException(status_code=404, detail="No finished round")
    data = learner.last_result.to_dict()
    data['wrong_words_text'] = learner.last_result.wrong_words_text()
    return data


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app

import pytest
from httpx import ASGITransport, AsyncClient
from quizbuilder.config import Settings
from quizbuilder.database import create_sql_engine, init_models
from quizbuilder.dependencies import get_quiz_builder
from quizbuilder.main import app
from quizbuilder.schemas import AlternativeCreate, ExerciseCreate, ModuleCreate, ModuleType
from quizbuilder.services import QuizBuilder
from quizbuilder.utils.auth_utils import get_current_user
from tests.support import COMPANY_ID, RacingDatabase

@pytest.fixture
def db():
    engine = create_sql_engine("sqlite://")
    init_models(engine)
    database = RacingDatabase(engine)
    yield database
    engine.dispose()

@pytest.fixture
def settings():
    return Settings(database_backend="sql", replacement_policy="lowest_order")

@pytest.fixture
def sleeps():
    """Records backoff delays instead of sleeping"""
    return []

@pytest.fixture
def builder(db, settings, sleeps):
    return QuizBuilder(db, settings, sleep=sleeps.append)

@pytest.fixture
def module(builder):
    result = builder.modules.create(COMPANY_ID, ModuleCreate(title="Safety basics", description="Intro"))
    assert result.success
    return result.data

@pytest.fixture
def exercise(builder, module):
    result = builder.exercises.create(module.id, ExerciseCreate(question="Which extinguisher for oil fires?"))
    assert result.success
    return result.data

@pytest.fixture
def make_alternatives(builder, exercise):
    """Create alternatives in order; returns the created entities"""
    def _make(*contents, correct=None):
        created = []
        for content in contents:
            result = builder.alternatives.create(
                exercise.id, AlternativeCreate(content=content, is_correct=(content == correct))
            )
            assert result.success, result.error
            created.append(result.data)
        return created
    return _make

@pytest.fixture
def exam(builder):
    result = builder.modules.create(COMPANY_ID, ModuleCreate(title="Final", type=ModuleType.EXAM))
    assert result.success
    return result.data

@pytest.fixture
def admin_user():
    return {"id": "admin-id", "email": "admin@quizbuilder.dev", "metadata": {}, "app_metadata": {"role": "admin"}}

@pytest.fixture
def member_user():
    return {"id": "member-id", "email": "member@quizbuilder.dev", "metadata": {}, "app_metadata": {}}

@pytest.fixture
def current_user(admin_user):
    return admin_user

@pytest.fixture
async def client(builder, current_user):
    """API client wired to the in-memory store"""
    app.dependency_overrides[get_quiz_builder] = lambda: builder
    app.dependency_overrides[get_current_user] = lambda: current_user
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


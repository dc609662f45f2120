"""
Pytest configuration and fixtures for testing.
Runs the app against an in-memory SQLite database with caching disabled.
"""
import os

# Settings are read at import time, so configure before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["RATE_LIMIT_PER_HOUR"] = "1000000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.main import app
from app.schemas.quiz import QuestionOut, QuizDetail
from app.utils.rate_limiter import rate_limiter


@pytest.fixture
def client():
    """Test client on a fresh database; startup and shutdown events run."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    
    with TestClient(app) as test_client:
        yield test_client
    
    rate_limiter.reset()


@pytest.fixture
def db(client):
    """Direct session on the same database as the client."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def teacher(client):
    response = client.post("/api/auth/register", json={
        "username": "ms_rahma", "password": "chalk", "role": "teacher"
    })
    return response.json()


@pytest.fixture
def student(client):
    response = client.post("/api/auth/register", json={
        "username": "budi", "password": "pencil", "role": "student"
    })
    return response.json()


def question_payload(text, correct_index, options=None):
    return {
        "text": text,
        "image_url": None,
        "options": options or ["A", "B", "C", "D"],
        "correct_index": correct_index,
    }


@pytest.fixture
def make_question():
    return question_payload


@pytest.fixture
def quiz_factory():
    """Build QuizDetail objects for store fakes: one question per correct index."""
    def build(quiz_id=1, title="Math Basics", correct_indices=(1, 0)):
        questions = [
            QuestionOut(position=i, **question_payload(f"Question {i + 1}", correct))
            for i, correct in enumerate(correct_indices)
        ]
        return QuizDetail(id=quiz_id, title=title, description="", teacher_id=1, questions=questions)
    return build

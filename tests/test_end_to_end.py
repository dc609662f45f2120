"""
End-to-end scenarios: HTTP API, notification channel and quiz session together.
"""
from app.client.api_client import QuizApiClient
from app.client.authoring import QuizDraft
from app.client.session import QuizSession, SessionState


def science_quiz(teacher_id, title="Science Quiz"):
    draft = QuizDraft(title=title, description="Plants")
    draft.set_text(0, "What do plants absorb?")
    for i, option in enumerate(["Sound", "Sunlight", "Salt", "Sand"]):
        draft.set_option(0, i, option)
    draft.set_correct_index(0, 1)
    return draft.build(teacher_id=teacher_id)


class TestNewQuizNotification:
    """Test cases for live notifications over the WebSocket channel."""
    
    def test_two_students_notified_once_each(self, client, teacher):
        api = QuizApiClient(client=client)
        
        with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
            assert len(client.app.state.notification_registry) == 2
            
            api.create_quiz(science_quiz(teacher["id"]))
            api.create_quiz(science_quiz(teacher["id"], title="History Quiz"))
            
            for ws in (first, second):
                assert ws.receive_json() == {"type": "NEW_QUIZ", "title": "Science Quiz"}
                assert ws.receive_json() == {"type": "NEW_QUIZ", "title": "History Quiz"}
        
        assert len(client.app.state.notification_registry) == 0
    
    def test_creation_without_listeners_succeeds(self, client, teacher):
        api = QuizApiClient(client=client)
        quiz_id = api.create_quiz(science_quiz(teacher["id"]))
        assert api.get_quiz_with_questions(quiz_id).title == "Science Quiz"
    
    def test_substituted_registry_serves_sockets_and_broadcasts(self, client, teacher):
        from app.api.notifications import get_registry
        from app.services.notification_registry import ConnectionRegistry
        
        substitute = ConnectionRegistry()
        client.app.dependency_overrides[get_registry] = lambda: substitute
        try:
            api = QuizApiClient(client=client)
            with client.websocket_connect("/ws") as ws:
                assert len(substitute) == 1
                assert len(client.app.state.notification_registry) == 0
                
                api.create_quiz(science_quiz(teacher["id"]))
                
                assert ws.receive_json() == {"type": "NEW_QUIZ", "title": "Science Quiz"}
            assert len(substitute) == 0
        finally:
            client.app.dependency_overrides.clear()
    
    def test_late_subscriber_gets_no_history(self, client, teacher):
        api = QuizApiClient(client=client)
        api.create_quiz(science_quiz(teacher["id"], title="Before"))
        
        with client.websocket_connect("/ws") as late:
            api.create_quiz(science_quiz(teacher["id"], title="After"))
            assert late.receive_json()["title"] == "After"


class TestStudentTakesQuiz:
    """Test cases for a full session against the real API."""
    
    def test_math_basics(self, client, teacher, student, make_question):
        api = QuizApiClient(client=client)
        quiz_id = api.create_quiz_with_questions(
            "Math Basics", "", teacher["id"],
            [make_question("1 + 1 = ?", 1), make_question("2 - 2 = ?", 0)],
        )
        
        session = QuizSession(api, student_id=student["id"])
        session.start(quiz_id)
        session.record_answer(0, 1)
        session.advance()
        session.record_answer(1, 2)
        snapshot = session.advance()
        
        assert snapshot.state == SessionState.COMPLETED.value
        assert (snapshot.score, snapshot.total, snapshot.percentage) == (1, 2, 50)
        assert snapshot.submitted
        
        results = api.list_results_for_student(student["id"])
        assert len(results) == 1
        assert (results[0].score, results[0].total, results[0].quiz_title) == (1, 2, "Math Basics")
        assert results[0].session_id == session.session_id
        
        by_quiz = api.list_results_for_quiz(quiz_id)
        assert by_quiz[0].student_name == "budi"
    
    def test_resubmitting_same_session_keeps_one_result(self, client, teacher, student, make_question):
        api = QuizApiClient(client=client)
        quiz_id = api.create_quiz_with_questions("One", "", teacher["id"], [make_question("?", 3)])
        
        session = QuizSession(api, student_id=student["id"])
        session.start(quiz_id)
        session.record_answer(0, 3)
        session.advance()
        session.submitted = False
        session.retry_submission()
        
        assert len(api.list_results_for_quiz(quiz_id)) == 1
    
    def test_zero_question_quiz(self, client, teacher, student):
        api = QuizApiClient(client=client)
        quiz_id = api.create_quiz_with_questions("Empty", "", teacher["id"], [])
        
        snapshot = QuizSession(api, student_id=student["id"]).start(quiz_id)
        
        assert snapshot.state == SessionState.COMPLETED.value
        assert (snapshot.score, snapshot.total, snapshot.percentage) == (0, 0, 0)
    
    def test_deleted_quiz_cannot_be_started(self, client, teacher, student, make_question):
        api = QuizApiClient(client=client)
        quiz_id = api.create_quiz_with_questions("Gone", "", teacher["id"], [make_question("?", 0)])
        assert api.delete_quiz_cascade(quiz_id) is True
        
        session = QuizSession(api, student_id=student["id"])
        snapshot = session.start(quiz_id)
        
        assert snapshot.state == SessionState.FAILED.value
        assert snapshot.current_question is None

"""
HTTP client for the quiz API, mirroring the server-side QuizStore operations
"""
import httpx
import logging
from typing import Any, Dict, List, Optional, Sequence, Union
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from app.config import settings
from app.exceptions import NotFoundError, QuizValidationError, TransportError
from app.schemas.auth import UserOut
from app.schemas.quiz import QuestionCreate, QuizCreate, QuizDetail, QuizSummary
from app.schemas.result import QuizResult, ResultOut, StudentResult

logger = logging.getLogger(__name__)


class QuizApiClient:
    """
    Store operations over HTTP
    
    Errors:
    - 404 -> NotFoundError
    - timeouts, connection failures, 5xx -> TransportError
    - other 4xx -> QuizValidationError
    """
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_wait: Optional[float] = None,
        client: Optional[httpx.Client] = None
    ):
        self.client = client or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.REQUEST_TIMEOUT_SECONDS,
        )
        self.max_attempts = max_attempts or settings.SUBMIT_MAX_ATTEMPTS
        self.retry_wait = settings.SUBMIT_RETRY_WAIT_SECONDS if retry_wait is None else retry_wait
    
    def __enter__(self):
        return self
    
    def __exit__(self, *exc_info):
        self.close()
    
    def close(self):
        self.client.close()
    
    # --- Auth ---
    
    def register(self, username: str, password: str, role: str) -> UserOut:
        data = self._request("POST", "/api/auth/register", json={
            "username": username, "password": password, "role": role
        })
        return UserOut(**data)
    
    def login(self, username: str, password: str) -> Optional[UserOut]:
        """Returns None when the credentials are rejected"""
        try:
            data = self._request("POST", "/api/auth/login", json={
                "username": username, "password": password
            })
        except QuizValidationError:
            return None
        return UserOut(**data)
    
    # --- Quizzes ---
    
    def get_quiz_with_questions(self, quiz_id: int) -> QuizDetail:
        return QuizDetail(**self._request("GET", f"/api/quizzes/{quiz_id}"))
    
    def list_quizzes(self) -> List[QuizSummary]:
        return [QuizSummary(**item) for item in self._request("GET", "/api/quizzes")]
    
    def create_quiz_with_questions(
        self,
        title: str,
        description: Optional[str],
        teacher_id: Optional[int],
        questions: Sequence[Union[QuestionCreate, Dict[str, Any]]]
    ) -> int:
        payload = QuizCreate(
            title=title,
            description=description,
            teacher_id=teacher_id,
            questions=list(questions),
        )
        return self.create_quiz(payload)
    
    def create_quiz(self, payload: QuizCreate) -> int:
        data = self._request("POST", "/api/quizzes", json=payload.model_dump(mode="json"))
        return data["id"]
    
    def delete_quiz_cascade(self, quiz_id: int) -> bool:
        return self._request("DELETE", f"/api/quizzes/{quiz_id}")["success"]
    
    # --- Results ---
    
    def record_result(
        self,
        quiz_id: int,
        student_id: int,
        score: int,
        total: int,
        session_id: Optional[str] = None
    ) -> ResultOut:
        """
        Submit a result, retrying transport failures a bounded number of times
        
        Raises:
            TransportError: every attempt failed
        """
        payload = {
            "quiz_id": quiz_id,
            "student_id": student_id,
            "score": score,
            "total": total,
            "session_id": session_id,
        }
        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception_type(TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        data = retryer(self._request, "POST", "/api/results", json=payload)
        return ResultOut(**data)
    
    def list_results_for_student(self, student_id: int) -> List[StudentResult]:
        return [StudentResult(**item) for item in self._request("GET", f"/api/results/student/{student_id}")]
    
    def list_results_for_quiz(self, quiz_id: int) -> List[QuizResult]:
        return [QuizResult(**item) for item in self._request("GET", f"/api/results/quiz/{quiz_id}")]
    
    # --- Internals ---
    
    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {str(e)}") from e
        
        if response.status_code == 404:
            raise NotFoundError(self._error_message(response))
        if response.status_code >= 500:
            raise TransportError(f"{method} {path} returned {response.status_code}")
        if response.status_code >= 400:
            raise QuizValidationError(self._error_message(response))
        
        return response.json()
    
    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return str(body.get("message") or body.get("detail") or body)
        return str(body)

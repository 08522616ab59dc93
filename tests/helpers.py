"""
Test helpers shared by the test modules
"""
import httpx

from quizzard.models import Score, User
from quizzard.services.auth_service import auth_service


def make_results(count=10, prefix="Question"):
    return [
        {
            "type": "multiple",
            "difficulty": "medium",
            "category": "General Knowledge",
            "question": f"{prefix} {i + 1}",
            "correct_answer": f"Answer {i + 1}",
            "incorrect_answers": ["A", "B", "C"],
        }
        for i in range(count)
    ]


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeTriviaUpstream:
    """
    httpx.MockTransport handler imitating Open Trivia DB

    Question responses are taken from `responses` in order (a dict is sent as
    JSON with status 200, an httpx.Response is sent as is, an exception is
    raised); once exhausted, ten fresh questions are returned.
    """

    def __init__(self):
        self.responses = []
        self.unreachable = False
        self.question_requests = []
        self.token_requests = []
        self._issued = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("api_token.php"):
            self.token_requests.append(request)
            if request.url.params.get("command") == "reset":
                return httpx.Response(200, json={"response_code": 0, "token": request.url.params["token"]})
            self._issued += 1
            return httpx.Response(200, json={"response_code": 0, "token": f"token-{self._issued}"})

        self.question_requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("upstream unreachable", request=request)

        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                return item
            return httpx.Response(200, json=item)

        return httpx.Response(200, json={"response_code": 0, "results": make_results()})


def create_user(db, username, email, password="password123", mana=0, mage_meter=0):
    user = User(
        username=username,
        email=email,
        password_hash=auth_service.hash_password(password),
        mana=mana,
        mage_meter=mage_meter,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_scores(db, user, count, correct=7):
    for _ in range(count):
        db.add(Score(
            user_id=user.id,
            category="General",
            difficulty="easy",
            question_count=10,
            correct_answers=correct,
        ))
    db.commit()


def auth_header(user):
    token = auth_service.create_access_token(str(user.id), user.username)
    return {"Authorization": f"Bearer {token}"}

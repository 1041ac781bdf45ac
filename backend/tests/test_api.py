"""
Questions Portal Backend — API Integration Tests
=================================================

What:  End-to-end tests through the HTTP layer against an in-memory SQLite
       database (aiosqlite).
How:   api_client overrides get_db_session; each test gets a fresh schema.

What we test:
    ✅ Create → get → filtered list round trip
    ✅ Identity header: 401 when absent, 400 when malformed
    ✅ Input validation (422) and unknown ids (404)
    ✅ Ownership on update/delete
    ✅ Vote lifecycle, one vote per user per question
    ✅ Later encounters widen filtering but never change the display fields
    ✅ Deleting a question removes its encounters and votes
    ✅ 500 responses still carry the request id
"""

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from app.models.question import Question, QuestionEncounter, QuestionType
from app.models.vote import QuestionVote

END = "2030-01-01T00:00:00Z"

DRAFT = {
    "company": "Google",
    "content": "Implement an LRU cache",
    "location": "Zurich",
    "question_type": "CODING",
    "role": "Software Engineer",
    "seen_at": "2022-06-01T10:00:00Z",
}


async def _create(client, headers, **overrides):
    response = await client.post("/api/questions", json={**DRAFT, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestQuestionEndpoints:

    @pytest.mark.asyncio
    async def test_create_get_and_list(self, api_client, auth_headers, user_id):
        created = await _create(api_client, auth_headers)
        assert created["user_id"] == str(user_id)
        assert created["question_type"] == "CODING"

        response = await api_client.get(f"/api/questions/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        question = response.json()
        assert question["company"] == "Google"
        assert question["location"] == "Zurich"
        assert question["type"] == "CODING"
        assert question["num_votes"] == 0
        assert question["num_answers"] == 0
        assert question["num_comments"] == 0

        response = await api_client.get(
            "/api/questions",
            params={"companies": ["Google", "Meta"], "end_date": END},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert [q["id"] for q in response.json()] == [created["id"]]

    @pytest.mark.asyncio
    async def test_list_excludes_non_matching(self, api_client, auth_headers):
        await _create(api_client, auth_headers)

        response = await api_client.get(
            "/api/questions",
            params={"companies": "Meta", "end_date": END},
            headers=auth_headers,
        )
        assert response.json() == []

        response = await api_client.get(
            "/api/questions",
            params={"question_types": "BEHAVIORAL", "end_date": END},
            headers=auth_headers,
        )
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_newest_first(self, api_client, auth_headers):
        first = await _create(api_client, auth_headers, content="first")
        second = await _create(api_client, auth_headers, content="second")

        response = await api_client.get(
            "/api/questions", params={"end_date": END}, headers=auth_headers
        )

        assert [q["id"] for q in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_missing_identity_header(self, api_client):
        response = await api_client.get("/api/questions", params={"end_date": END})

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "unauthorized"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_malformed_identity_header(self, api_client):
        response = await api_client.get(
            "/api/questions", params={"end_date": END}, headers={"X-User-ID": "not-a-uuid"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_end_date_is_required(self, api_client, auth_headers):
        response = await api_client.get("/api/questions", headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_question_type_rejected(self, api_client, auth_headers):
        response = await api_client.post(
            "/api/questions", json={**DRAFT, "question_type": "TRIVIA"}, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_question(self, api_client, auth_headers):
        response = await api_client.get(f"/api/questions/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_owner_updates_and_deletes(self, api_client, auth_headers):
        created = await _create(api_client, auth_headers)
        url = f"/api/questions/{created['id']}"

        response = await api_client.patch(
            url, json={"question_type": "THEORY"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["question_type"] == "THEORY"
        assert response.json()["content"] == DRAFT["content"]

        response = await api_client.delete(url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

        response = await api_client.get(url, headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_other_user_cannot_update_or_delete(self, api_client, auth_headers, other_headers):
        created = await _create(api_client, auth_headers)
        url = f"/api/questions/{created['id']}"

        response = await api_client.patch(url, json={"content": "hijacked"}, headers=other_headers)
        assert response.status_code == 401
        assert response.json()["message"] == "User have no authorization to record."

        response = await api_client.delete(url, headers=other_headers)
        assert response.status_code == 401

        response = await api_client.get(url, headers=auth_headers)
        assert response.json()["content"] == DRAFT["content"]

    @pytest.mark.asyncio
    async def test_later_encounter_widens_filter_only(
        self, api_client, auth_headers, other_headers
    ):
        created = await _create(api_client, auth_headers)

        response = await api_client.post(
            f"/api/questions/{created['id']}/encounters",
            json={
                "company": "Meta",
                "location": "London",
                "role": "Staff Engineer",
                "seen_at": "2023-02-01T00:00:00Z",
            },
            headers=other_headers,
        )
        assert response.status_code == 201

        response = await api_client.get(
            "/api/questions",
            params={"companies": "Meta", "end_date": END},
            headers=auth_headers,
        )
        (question,) = response.json()
        assert question["company"] == "Google"
        assert question["location"] == "Zurich"

    @pytest.mark.asyncio
    async def test_encounter_for_unknown_question(self, api_client, auth_headers):
        response = await api_client.post(
            f"/api/questions/{uuid.uuid4()}/encounters",
            json={"company": "A", "location": "B", "role": "C", "seen_at": END},
            headers=auth_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_removes_encounters_and_votes(
        self, api_client, auth_headers, other_headers, session_factory
    ):
        created = await _create(api_client, auth_headers)
        question_id = uuid.UUID(created["id"])
        for headers in (auth_headers, other_headers):
            response = await api_client.post(
                "/api/votes",
                json={"question_id": created["id"], "vote": "UPVOTE"},
                headers=headers,
            )
            assert response.status_code == 201

        response = await api_client.delete(f"/api/questions/{created['id']}", headers=auth_headers)
        assert response.status_code == 200

        async with session_factory() as session:
            encounters = await session.scalar(
                select(func.count(QuestionEncounter.id)).where(
                    QuestionEncounter.question_id == question_id
                )
            )
            votes = await session.scalar(
                select(func.count(QuestionVote.id)).where(QuestionVote.question_id == question_id)
            )
        assert encounters == 0
        assert votes == 0

        response = await api_client.get(
            f"/api/questions/{created['id']}/vote", headers=auth_headers
        )
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_encounters_with_equal_created_at_ordered_by_id(
        self, api_client, auth_headers, user_id, session_factory
    ):
        tie = datetime(2023, 5, 1, 12, 0, tzinfo=timezone.utc)
        low_id = uuid.UUID("00000000-0000-4000-8000-000000000001")
        high_id = uuid.UUID("ffffffff-ffff-4fff-bfff-ffffffffffff")
        question = Question(
            content="Merge k sorted lists", question_type=QuestionType.CODING, user_id=user_id
        )
        async with session_factory() as session:
            session.add(question)
            await session.flush()
            # Inserted in the opposite order of their ids
            for encounter_id, company in ((high_id, "Amazon"), (low_id, "Netflix")):
                session.add(QuestionEncounter(
                    id=encounter_id,
                    question_id=question.id,
                    user_id=user_id,
                    company=company,
                    seen_at=tie,
                    created_at=tie,
                ))
            await session.commit()

        for _ in range(2):
            response = await api_client.get(f"/api/questions/{question.id}", headers=auth_headers)
            assert response.json()["company"] == "Netflix"


        assert response.status_code == 404


class TestVoteEndpoints:

    @pytest.mark.asyncio
    async def test_vote_lifecycle(self, api_client, auth_headers):
        question = await _create(api_client, auth_headers)
        vote_url = f"/api/questions/{question['id']}/vote"

        response = await api_client.get(vote_url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() is None

        response = await api_client.post(
            "/api/votes",
            json={"question_id": question["id"], "vote": "UPVOTE"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        vote = response.json()

        response = await api_client.get(f"/api/questions/{question['id']}", headers=auth_headers)
        assert response.json()["num_votes"] == 1

        response = await api_client.patch(
            f"/api/votes/{vote['id']}", json={"vote": "DOWNVOTE"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["vote"] == "DOWNVOTE"

        response = await api_client.get(f"/api/questions/{question['id']}", headers=auth_headers)
        assert response.json()["num_votes"] == -1

        response = await api_client.delete(f"/api/votes/{vote['id']}", headers=auth_headers)
        assert response.status_code == 200

        response = await api_client.get(vote_url, headers=auth_headers)
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_no_vote_is_not_accepted(self, api_client, auth_headers):
        question = await _create(api_client, auth_headers)

        response = await api_client.post(
            "/api/votes",
            json={"question_id": question["id"], "vote": "NO_VOTE"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_vote_fails(self, api_client, auth_headers, session_factory):
        question = await _create(api_client, auth_headers)
        body = {"question_id": question["id"], "vote": "UPVOTE"}

        first = await api_client.post("/api/votes", json=body, headers=auth_headers)
        second = await api_client.post(
            "/api/votes", json=body, headers={**auth_headers, "X-Request-ID": "abc12345"}
        )

        assert first.status_code == 201
        assert second.status_code == 500
        assert second.json()["error"] == "internal_server_error"
        assert second.json()["request_id"] == "abc12345"
        assert second.headers["X-Request-ID"] == "abc12345"

        async with session_factory() as session:
            count = await session.scalar(select(func.count(QuestionVote.id)))
        assert count == 1

    @pytest.mark.asyncio
    async def test_other_user_cannot_change_vote(self, api_client, auth_headers, other_headers):
        question = await _create(api_client, auth_headers)
        response = await api_client.post(
            "/api/votes",
            json={"question_id": question["id"], "vote": "UPVOTE"},
            headers=auth_headers,
        )
        vote_id = response.json()["id"]

        response = await api_client.patch(
            f"/api/votes/{vote_id}", json={"vote": "DOWNVOTE"}, headers=other_headers
        )
        assert response.status_code == 401

        response = await api_client.delete(f"/api/votes/{vote_id}", headers=other_headers)
        assert response.status_code == 401


class TestHealthEndpoint:

    @pytest.mark.asyncio
    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

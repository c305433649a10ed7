"""
Tests for LinkedIn / GitHub profile reviews.
"""
import json

import httpx
import pytest

from pathwise.db.models.profile_review import ProfileReview
from pathwise.services import profile_reviewer
from pathwise.services.profile_reviewer import ProfileFetchError

LINKEDIN_URL = "https://www.linkedin.com/in/jane-doe"
GITHUB_URL = "https://github.com/janedoe"

LINKEDIN_DATA = {
    "headline": "Backend Engineer | Python, APIs and cloud infrastructure",
    "summary": "I build reliable services.",
    "experience": [{"title": "Backend Engineer", "company": "Acme", "duration": "3 years"}],
    "skills": ["Python", "SQL", "Docker", "AWS", "FastAPI"],
}

GITHUB_PROFILE = {
    "username": "janedoe",
    "name": "Jane Doe",
    "bio": "I write backend services",
    "blog": "",
    "followers": 3,
    "repos": [
        {"name": "api", "description": "REST API", "language": "Python", "stars": 4, "fork": False},
        {"name": "ui", "description": None, "language": "TypeScript", "stars": 0, "fork": False},
        {"name": "forked", "description": "x", "language": "Go", "stars": 100, "fork": True},
    ],
}


@pytest.fixture
def github_profile(monkeypatch):
    monkeypatch.setattr(profile_reviewer, "fetch_github_profile", lambda url: dict(GITHUB_PROFILE))


@pytest.mark.parametrize("url,profile_type,valid", [
    (LINKEDIN_URL, "linkedin", True),
    ("https://linkedin.com/pub/jane/1/2/3", "linkedin", True),
    ("https://www.linkedin.com/company/acme", "linkedin", False),
    (GITHUB_URL, "github", True),
    ("https://github.com/", "github", False),
    ("github.com/janedoe", "github", False),
    (GITHUB_URL, "linkedin", False),
])
def test_validate_profile_url(url, profile_type, valid):
    assert profile_reviewer.validate_profile_url(url, profile_type) is valid


def test_analyze_rejects_invalid_url(client, auth_headers):
    response = client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": "https://example.com/me", "profile_type": "github"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Please provide a valid github profile URL"


def test_linkedin_requires_profile_details(client, auth_headers):
    response = client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": LINKEDIN_URL, "profile_type": "linkedin", "linkedin_data": {"headline": "Engineer"}},
        headers=auth_headers,
    )

    assert response.status_code == 400
    data = response.json()
    assert data["requires_linkedin_data"] is True
    assert data["missing_fields"] == ["summary", "experience", "skills"]


def test_linkedin_review_is_upserted_per_url(client, auth_headers, db):
    payload = {"profile_url": LINKEDIN_URL, "profile_type": "linkedin", "linkedin_data": LINKEDIN_DATA}

    first = client.post("/profile-reviewer/analyze", json=payload, headers=auth_headers)
    assert first.status_code == 200
    analysis = first.json()["analysis"]
    assert analysis["source"] == "heuristic"
    assert 0 <= analysis["overall_score"] <= 100
    assert analysis["suggestions"]

    second = client.post("/profile-reviewer/analyze", json=payload, headers=auth_headers)
    assert second.json()["review_id"] == first.json()["review_id"]
    assert db.query(ProfileReview).count() == 1


def test_heuristic_linkedin_score_rewards_completeness():
    sparse = profile_reviewer.heuristic_linkedin_review({"headline": "Engineer"})
    full = profile_reviewer.heuristic_linkedin_review({
        **LINKEDIN_DATA,
        "summary": "word " * 50,
        "education": [{"school": "MIT"}],
        "recommendations": 3,
        "posts": [{"content": "hello"}],
    })

    assert full.overall_score > sparse.overall_score
    assert any(s.priority == "high" for s in sparse.suggestions)
    assert sparse.action_plan.immediate


def test_github_review(client, auth_headers, github_profile):
    response = client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": GITHUB_URL, "profile_type": "github"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["source"] == "heuristic"
    assert "Works in 2 languages" in analysis["strengths"]
    assert "Few original repositories" in analysis["weaknesses"]


def test_github_review_with_model(client, auth_headers, github_profile, fake_llm):
    provider = fake_llm(json.dumps({
        "overallScore": 64,
        "strengths": ["Clear bio"],
        "suggestions": [{"category": "projects", "priority": "HIGH", "suggestion": "Pin your best repos"}, {"priority": "low"}],
        "actionPlan": {"immediate": ["Pin repos"]},
    }))

    response = client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": GITHUB_URL, "profile_type": "github", "additional_context": "Job hunting"},
        headers=auth_headers,
    )

    analysis = response.json()["analysis"]
    assert analysis["source"] == "ai"
    assert analysis["overall_score"] == 64
    assert analysis["suggestions"] == [
        {"category": "projects", "priority": "high", "suggestion": "Pin your best repos", "impact": ""}
    ]
    assert "Job hunting" in provider.calls[0][1]["content"]


def test_github_fetch_failure(client, auth_headers, monkeypatch):
    def fail(url):
        raise ProfileFetchError("GitHub API error: 404")

    monkeypatch.setattr(profile_reviewer, "fetch_github_profile", fail)

    response = client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": GITHUB_URL, "profile_type": "github"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "GitHub API error: 404"


def _mock_github(monkeypatch, handler):
    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(profile_reviewer.httpx, "Client", client_factory)


def test_fetch_github_profile(monkeypatch):
    def handler(request):
        if request.url.path == "/users/janedoe":
            return httpx.Response(200, json={"name": "Jane", "bio": "Dev", "followers": 5, "public_repos": 1})
        if request.url.path == "/users/janedoe/repos":
            return httpx.Response(200, json=[{"name": "api", "language": "Python", "stargazers_count": 2}])
        return httpx.Response(404)

    _mock_github(monkeypatch, handler)

    profile = profile_reviewer.fetch_github_profile(GITHUB_URL)

    assert profile["username"] == "janedoe"
    assert profile["followers"] == 5
    assert profile["repos"] == [{
        "name": "api", "description": None, "language": "Python", "stars": 2,
        "forks": 0, "fork": False, "updated_at": None,
    }]


def test_fetch_github_profile_unknown_user(monkeypatch):
    _mock_github(monkeypatch, lambda request: httpx.Response(404, json={"message": "Not Found"}))

    with pytest.raises(ProfileFetchError, match="404"):
        profile_reviewer.fetch_github_profile("https://github.com/nobody-here")


def test_list_notes_insights_and_delete(client, auth_headers, github_profile):
    client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": LINKEDIN_URL, "profile_type": "linkedin", "linkedin_data": LINKEDIN_DATA},
        headers=auth_headers,
    )
    github = client.post(
        "/profile-reviewer/analyze",
        json={"profile_url": GITHUB_URL, "profile_type": "github"},
        headers=auth_headers,
    ).json()

    all_reviews = client.get("/profile-reviewer/reviews", headers=auth_headers).json()
    assert all_reviews["count"] == 2
    only_github = client.get("/profile-reviewer/reviews", params={"profile_type": "github"}, headers=auth_headers).json()
    assert [r["profile_type"] for r in only_github["reviews"]] == ["github"]

    review_id = github["review_id"]
    notes = client.put(
        f"/profile-reviewer/reviews/{review_id}/notes",
        json={"notes": "Pin repos next", "completed_suggestions": ["Add descriptions to every repository"]},
        headers=auth_headers,
    )
    assert notes.status_code == 200
    assert notes.json()["review"]["notes"] == "Pin repos next"

    insights = client.get("/profile-reviewer/insights", headers=auth_headers).json()["insights"]
    assert insights["total_reviews"] == 2
    assert insights["top_suggestions"]
    assert insights["completion_rate"] > 0

    assert client.delete(f"/profile-reviewer/reviews/{review_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/profile-reviewer/reviews/{review_id}", headers=auth_headers).status_code == 404

"""
Tests for career path generation, storage, skill gaps and resources.
"""
import json

import pytest

from pathwise.db.models.career_path import CareerPath
from pathwise.services import career_service

AI_PATH = {
    "title": "Data Engineer Career Path",
    "description": "From Python basics to production pipelines",
    "duration": "2 weeks",
    "difficulty": "intermediate",
    "totalWeeks": "2",
    "skillsToLearn": ["SQL", "Airflow"],
    "weeklyPlan": [
        {
            "week": 1,
            "title": "SQL",
            "skills": "SQL",
            "resources": [
                {"title": "SQL Tutorial", "type": "article", "url": "https://www.w3schools.com/sql/"},
                {"type": "video"},
            ],
            "milestones": ["Write joins"],
        },
        {"week": 2, "title": "Airflow", "skills": ["Airflow"]},
    ],
}


@pytest.mark.parametrize("timeframe,weeks", [
    ("8 weeks", 8),
    ("3 months", 13),
    ("1 year", 52),
    ("14 days", 2),
    ("whenever", 8),
    (None, 8),
])
def test_parse_timeframe_weeks(timeframe, weeks):
    assert career_service.parse_timeframe_weeks(timeframe) == weeks


def test_template_career_path_skips_known_skills():
    path = career_service.template_career_path("Data Engineer", ["python", "SQL"], "entry", "4 weeks")

    assert path.total_weeks == 4
    assert len(path.weekly_plan) == 4
    assert [week.week for week in path.weekly_plan] == [1, 2, 3, 4]
    assert "Python" not in path.skills_to_learn
    assert "SQL" not in path.skills_to_learn
    assert path.weekly_plan[-1].title == "Capstone Project"
    assert path.difficulty == "Beginner"


def test_generate_career_path_uses_model_output(fake_llm):
    provider = fake_llm("Here is your plan:\n```json\n" + json.dumps(AI_PATH) + "\n```")

    path = career_service.generate_career_path("Data Engineer", ["Python"], "mid", "2 weeks")

    assert len(provider.calls) == 1
    assert path.title == "Data Engineer Career Path"
    assert path.difficulty == "Intermediate"
    assert path.total_weeks == 2
    assert path.weekly_plan[0].skills == ["SQL"]
    # the resource without a title is dropped
    assert [r.title for r in path.weekly_plan[0].resources] == ["SQL Tutorial"]


def test_generate_career_path_falls_back_without_weekly_plan(fake_llm):
    fake_llm(json.dumps({"title": "Empty", "weeklyPlan": []}))

    path = career_service.generate_career_path("Frontend Developer", [], "entry", "3 weeks")

    assert path.title == "Frontend Developer Career Path"
    assert len(path.weekly_plan) == 3


def test_generate_career_path_falls_back_on_model_error(failing_llm):
    path = career_service.generate_career_path("DevOps Engineer", timeframe="2 weeks")

    assert len(path.weekly_plan) == 2
    assert path.weekly_plan[0].skills == ["Linux"]


def test_generate_path_endpoint_stores_single_path(client, auth_headers, db):
    client.put(
        "/profile",
        json={"skills": ["Python"], "experience": {"level": "senior"}, "career_goals": {"timeframe": "5 weeks"}},
        headers=auth_headers,
    )

    first = client.post("/career/generate-path", json={"target_role": "Backend Engineer"}, headers=auth_headers)
    assert first.status_code == 200
    career_path = first.json()["career_path"]
    assert career_path["total_weeks"] == 5
    assert career_path["timeframe"] == "5 weeks"
    assert career_path["difficulty"] == "Advanced"
    assert "Python" not in career_path["skills_to_learn"]

    second = client.post(
        "/career/generate-path",
        json={"target_role": "Data Analyst", "timeframe": "2 weeks", "pace": "fast"},
        headers=auth_headers,
    )
    assert second.status_code == 200
    assert db.query(CareerPath).count() == 1
    assert second.json()["career_path"]["target_role"] == "Data Analyst"
    assert second.json()["career_path"]["pace"] == "fast"


def test_generate_path_requires_target_role(client, auth_headers):
    response = client.post("/career/generate-path", json={"timeframe": "2 weeks"}, headers=auth_headers)

    assert response.status_code == 400


def test_career_path_crud(client, auth_headers):
    assert client.get("/career/path", headers=auth_headers).status_code == 404

    client.post("/career/generate-path", json={"target_role": "Data Engineer", "timeframe": "2 weeks"}, headers=auth_headers)

    updated = client.put(
        "/career/path",
        json={"title": "My Data Path", "weekly_plan": [{"week": 1, "title": "SQL", "skills": "SQL"}]},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    career_path = updated.json()["career_path"]
    assert career_path["title"] == "My Data Path"
    assert career_path["weekly_plan"][0]["skills"] == ["SQL"]
    assert career_path["weekly_plan"][0]["resources"] == []

    assert client.get("/career/path", headers=auth_headers).json()["career_path"]["title"] == "My Data Path"

    assert client.delete("/career/path", headers=auth_headers).status_code == 200
    assert client.get("/career/path", headers=auth_headers).status_code == 404


def test_save_and_read_saved_path(client, auth_headers):
    assert client.get("/career/saved-path", headers=auth_headers).status_code == 404

    response = client.post("/career/save-path", json={"career_path": AI_PATH}, headers=auth_headers)
    assert response.status_code == 200

    saved = client.get("/career/saved-path", headers=auth_headers).json()
    assert saved["career_path"]["title"] == "Data Engineer Career Path"
    assert saved["career_path"]["total_weeks"] == 2
    assert saved["generated_at"]


def test_save_path_requires_data(client, auth_headers):
    response = client.post("/career/save-path", json={"career_path": {}}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Career path data is required"


def test_analyze_skills_template(client, auth_headers):
    client.put("/profile", json={"skills": ["HTML", "css"]}, headers=auth_headers)

    response = client.post("/career/analyze-skills", json={"target_role": "Frontend Developer"}, headers=auth_headers)

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["source"] == "heuristic"
    assert analysis["strong_skills"] == ["HTML", "css"]
    assert analysis["missing_skills"][0] == "JavaScript"
    assert analysis["learning_priority"][0]["priority"] == "High"


def test_analyze_skills_with_model(fake_llm):
    fake_llm(json.dumps({
        "missingSkills": ["Kubernetes"],
        "strongSkills": ["Docker"],
        "learningPriority": [{"skill": "Kubernetes", "priority": "high", "timeToLearn": "4 weeks"}, {"priority": "low"}],
        "recommendations": "Learn Kubernetes",
    }))

    analysis = career_service.analyze_skill_gap(["Docker"], "DevOps Engineer")

    assert analysis.source == "ai"
    assert analysis.missing_skills == ["Kubernetes"]
    assert len(analysis.learning_priority) == 1
    assert analysis.learning_priority[0].priority == "High"
    assert analysis.learning_priority[0].time_to_learn == "4 weeks"


def test_resources_require_skill(client, auth_headers):
    response = client.get("/career/resources", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Skill parameter is required"


def test_resources_empty_without_model(client, auth_headers):
    response = client.get("/career/resources", params={"skill": "Rust"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["resources"] == []


def test_resources_capped_at_eight(fake_llm):
    items = [{"title": f"Resource {i}", "url": f"https://example.com/{i}"} for i in range(12)]
    fake_llm(json.dumps(items))

    resources = career_service.recommend_resources("Rust", "beginner")

    assert len(resources) == 8
    assert resources[0].title == "Resource 0"

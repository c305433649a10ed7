"""
Tests for resume analysis: model output normalization and rule-based fallback.
"""
import json

import pytest

from pathwise.services.resume_analyzer import (
    ResumeAnalysisError,
    analyze_resume,
    generate_heuristic_analysis,
)

RESUME_TEXT = """Jane Doe
jane.doe@example.com
Summary
Backend engineer with 6 years of experience.
Experience
Senior Software Engineer at Acme Corp
- Reduced API latency by 40%
Skills
Python, SQL, Docker
"""


def test_empty_text_is_rejected():
    with pytest.raises(ResumeAnalysisError):
        analyze_resume("   \n ")


def test_without_model_uses_rules():
    result = analyze_resume(RESUME_TEXT, target_role="Backend Engineer")

    assert result.source == "heuristic"
    assert 0 <= result.overall_score <= 100
    assert result.formatting_analysis.length == "Too short"
    assert result.experience_analysis.total_years == 6
    assert {"Python", "SQL", "Docker"} <= {s.skill for s in result.skills_analysis.identified_skills}
    assert result.industry_analysis.target_industry == "Backend Engineer"


def test_heuristic_score_is_deterministic():
    result = generate_heuristic_analysis("Skills\nPython", {"skills": "Python"})

    # base 35 + one section 5 + one skill 1 + short length 3
    assert result.overall_score == 44
    assert result.recommendations.immediate == [
        "Proofread for errors",
        "Add contact information",
        "Add a summary section",
        "Add a experience section",
        "Add a education section",
    ]
    assert generate_heuristic_analysis("Skills\nPython", {"skills": "Python"}) == result


def test_model_answer_is_normalized(fake_llm):
    provider = fake_llm(json.dumps({
        "overallScore": "85%",
        "skillsAnalysis": {
            "identifiedSkills": [
                {"skill": "Python", "relevance": "HIGH", "frequency": "3"},
                {"relevance": "low"},
                "Docker",
            ],
            "technicalSkills": "Python",
        },
        "atsAnalysis": {"keywordMatch": 140, "formatting": "n/a"},
        "sectionAnalysis": "not a list",
    }))

    result = analyze_resume(RESUME_TEXT, target_role="Backend Engineer")

    assert "Target Role: Backend Engineer" in provider.calls[0][1]["content"]
    assert result.source == "ai"
    assert result.overall_score == 85
    skills = result.skills_analysis.identified_skills
    assert len(skills) == 1
    assert skills[0].relevance == "high"
    assert skills[0].frequency == 3
    assert result.skills_analysis.technical_skills == ["Python"]
    assert result.ats_analysis.keyword_match == 100
    assert result.ats_analysis.formatting == 70
    assert result.section_analysis == []
    assert result.improvement_plan.weekly_goals == []

    data = result.to_dict()
    assert "overall_score" in data
    assert "content_analysis" in data


def test_unparseable_model_answer_falls_back(fake_llm):
    fake_llm("I am unable to analyze this resume.")

    result = analyze_resume(RESUME_TEXT)

    assert result.source == "heuristic"


def test_model_error_falls_back(failing_llm):
    result = analyze_resume(RESUME_TEXT)

    assert result.source == "heuristic"

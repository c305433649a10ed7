"""
Career path generation, skill gap analysis and learning resource
recommendations.

Each operation asks the language model first. Career paths and skill gap
analyses fall back to deterministic templates; resource recommendations
fall back to an empty list.
"""
import logging
import re
from typing import List, Optional
from urllib.parse import urlencode

from pathwise.llm.provider import LLMError
from pathwise.llm.router import get_llm_provider
from pathwise.schemas.career import CareerPathData, CareerResource, SkillGapAnalysis
from pathwise.services.json_repair import JSONRepairError, parse_model_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert career advisor and learning path designer. Create detailed, practical career "
    "roadmaps with real resources and actionable steps. Always provide comprehensive weekly plans with "
    "specific skills, detailed resources with real URLs, clear milestones, and practical projects. "
    "Always return valid JSON without markdown formatting."
)

DEFAULT_TIMEFRAME = "8 weeks"
DEFAULT_EXPERIENCE_LEVEL = "entry"
MAX_RESOURCES = 8
MAX_TEMPLATE_WEEKS = 52

HOURS_PER_WEEK = {"slow": 5, "normal": 10, "fast": 20}

# keyword in target role -> core skills, most fundamental first
ROLE_SKILLS = {
    "data scien": ["Python", "Statistics", "SQL", "Pandas", "Machine Learning", "Data Visualization", "Scikit-learn", "Deep Learning"],
    "data engineer": ["Python", "SQL", "Data Modeling", "ETL Pipelines", "Apache Spark", "Airflow", "Cloud Data Warehouses", "Docker"],
    "data analyst": ["Excel", "SQL", "Statistics", "Python", "Tableau", "Power BI", "Data Storytelling"],
    "machine learning": ["Python", "Linear Algebra", "Statistics", "Machine Learning", "Deep Learning", "PyTorch", "MLOps"],
    "frontend": ["HTML", "CSS", "JavaScript", "TypeScript", "React", "Testing", "Web Performance", "Accessibility"],
    "backend": ["Python", "SQL", "REST APIs", "Authentication", "Docker", "Caching", "Testing", "System Design"],
    "full stack": ["HTML", "CSS", "JavaScript", "React", "Node.js", "SQL", "REST APIs", "Docker"],
    "devops": ["Linux", "Git", "Bash", "Docker", "Kubernetes", "CI/CD", "Terraform", "Monitoring"],
    "cloud": ["Linux", "Networking", "AWS", "Infrastructure as Code", "Docker", "Kubernetes", "Security"],
    "security": ["Networking", "Linux", "Security Fundamentals", "Cryptography", "Threat Modeling", "Penetration Testing"],
    "mobile": ["Kotlin", "Swift", "Mobile UI Design", "REST APIs", "Testing", "App Store Deployment"],
    "product manager": ["Product Strategy", "User Research", "Roadmapping", "Analytics", "Agile", "Stakeholder Communication"],
    "designer": ["Design Principles", "Figma", "User Research", "Prototyping", "Accessibility", "Design Systems"],
    "software": ["Git", "Python", "Data Structures", "Algorithms", "SQL", "Testing", "System Design"],
}
GENERIC_SKILLS = ["Industry Fundamentals", "Core Tools", "Communication", "Project Work", "Portfolio Building", "Interview Preparation"]

_TIMEFRAME_RE = re.compile(r"(\d+)\s*(day|week|month|year)s?", re.I)


def parse_timeframe_weeks(timeframe: Optional[str], default: int = 8) -> int:
    """Turn "8 weeks", "3 months" or "1 year" into a whole number of weeks."""
    match = _TIMEFRAME_RE.search(timeframe or "")
    if not match:
        return default
    amount, unit = int(match.group(1)), match.group(2).lower()
    weeks = {
        "day": amount / 7,
        "week": amount,
        "month": amount * 52 / 12,
        "year": amount * 52,
    }[unit]
    return max(1, min(MAX_TEMPLATE_WEEKS, round(weeks)))


def role_skills(target_role: str) -> List[str]:
    role = (target_role or "").lower()
    for keyword, skills in ROLE_SKILLS.items():
        if keyword in role:
            return list(skills)
    return list(GENERIC_SKILLS)


def _ask_model(prompt: str, expect: type):
    """Return parsed JSON from the model, or None when AI is unavailable or unusable."""
    provider = get_llm_provider()
    if provider is None:
        return None
    try:
        response = provider.complete(SYSTEM_PROMPT, prompt, temperature=0.7)
        return parse_model_json(response, expect=expect)
    except (LLMError, JSONRepairError) as e:
        logger.warning(f"AI career request unusable ({type(e).__name__}: {e})")
        return None


# ============================================
# Career path
# ============================================

def build_career_path_prompt(
    target_role: str,
    current_skills: List[str],
    experience_level: str,
    timeframe: str,
    interests: List[str],
    pace: str = "normal",
) -> str:
    return f"""Create a comprehensive career learning path for someone who wants to become a {target_role}.

Current context:
- Target Role: {target_role}
- Current Skills: {', '.join(current_skills) or 'None listed'}
- Experience Level: {experience_level}
- Desired Timeframe: {timeframe}
- Learning Pace: {pace} (about {HOURS_PER_WEEK.get(pace, 10)} hours per week)
- Interests: {', '.join(interests) or 'None listed'}

Respond in this JSON format with COMPLETE weekly plans:

{{
  "title": "Career path title",
  "description": "Detailed description of the career path",
  "duration": "{timeframe}",
  "difficulty": "Beginner|Intermediate|Advanced",
  "totalWeeks": number_of_weeks,
  "prerequisites": ["prerequisite1"],
  "outcomes": ["outcome1"],
  "skillsToLearn": ["skill1"],
  "marketDemand": "High demand with X% growth expected",
  "averageSalary": "$XX,000 - $XX,000",
  "jobTitles": ["title1"],
  "weeklyPlan": [
    {{
      "week": 1,
      "title": "Week title",
      "description": "What will be learned this week",
      "skills": ["skill1"],
      "resources": [
        {{"title": "Resource title", "type": "video|article|course|practice|project", "url": "https://real-url.com",
          "duration": "X hours", "description": "What this resource covers", "source": "Platform name"}}
      ],
      "milestones": ["milestone1"],
      "projects": ["project1"]
    }}
  ]
}}

IMPORTANT:
- Provide REAL URLs for resources (YouTube, Coursera, freeCodeCamp, MDN, official documentation)
- Include 3-5 resources per week
- Make sure each week has specific skills, milestones, and projects
- Ensure the weekly plan covers the full timeframe requested"""


def generate_career_path(
    target_role: str,
    current_skills: Optional[List[str]] = None,
    experience_level: Optional[str] = None,
    timeframe: Optional[str] = None,
    interests: Optional[List[str]] = None,
    pace: str = "normal",
) -> CareerPathData:
    """Generate a week-by-week roadmap toward `target_role`."""
    current_skills = current_skills or []
    interests = interests or []
    experience_level = experience_level or DEFAULT_EXPERIENCE_LEVEL
    timeframe = timeframe or DEFAULT_TIMEFRAME

    data = _ask_model(
        build_career_path_prompt(target_role, current_skills, experience_level, timeframe, interests, pace),
        dict,
    )
    if data is not None:
        path = CareerPathData.lenient({"title": f"{target_role} Career Path", **data})
        if path.weekly_plan:
            if not path.total_weeks:
                path.total_weeks = len(path.weekly_plan)
            logger.info(f"Career path generated by AI: role={target_role}, weeks={path.total_weeks}")
            return path
        logger.warning("AI career path had no weekly plan, using template")

    return template_career_path(target_role, current_skills, experience_level, timeframe, pace)


def _difficulty_for(experience_level: str) -> str:
    if experience_level in ("senior", "expert"):
        return "Advanced"
    if experience_level in ("mid", "junior"):
        return "Intermediate"
    return "Beginner"


def template_career_path(
    target_role: str,
    current_skills: List[str],
    experience_level: str,
    timeframe: str,
    pace: str = "normal",
) -> CareerPathData:
    """Deterministic roadmap: the role's core skills the user lacks, spread across the timeframe."""
    total_weeks = parse_timeframe_weeks(timeframe)
    known = {skill.lower() for skill in current_skills}
    core = role_skills(target_role)
    to_learn = [skill for skill in core if skill.lower() not in known] or core

    weekly_plan = []
    for week in range(1, total_weeks + 1):
        skill = to_learn[(week - 1) * len(to_learn) // total_weeks]
        is_last = week == total_weeks
        weekly_plan.append({
            "week": week,
            "title": "Capstone Project" if is_last else f"{skill} Fundamentals",
            "description": (
                f"Combine everything learned into a portfolio project for a {target_role} role."
                if is_last else f"Build a working understanding of {skill} for a {target_role} role."
            ),
            "skills": to_learn if is_last else [skill],
            "resources": [{
                "title": f"{skill} documentation and tutorials",
                "type": "article",
                "url": "https://www.google.com/search?" + urlencode({"q": f"{skill} tutorial"}),
                "duration": f"{HOURS_PER_WEEK.get(pace, 10)} hours",
                "description": f"Curated introductory material on {skill}",
                "source": "Web",
            }],
            "milestones": [f"Complete a small exercise using {skill}"] if not is_last else ["Publish the capstone project"],
            "projects": [f"{target_role} portfolio project"] if is_last else [],
            "hours": HOURS_PER_WEEK.get(pace, 10),
        })

    return CareerPathData.model_validate({
        "title": f"{target_role} Career Path",
        "description": f"A {total_weeks}-week roadmap covering the core skills of a {target_role}.",
        "duration": timeframe,
        "difficulty": _difficulty_for(experience_level),
        "total_weeks": total_weeks,
        "prerequisites": ["Basic computer literacy"],
        "outcomes": [f"Job-ready foundation as a {target_role}", "Portfolio project"],
        "skills_to_learn": to_learn,
        "market_demand": "Unknown",
        "average_salary": "Unknown",
        "job_titles": [target_role],
        "weekly_plan": weekly_plan,
    })


# ============================================
# Skill gap
# ============================================

def analyze_skill_gap(current_skills: List[str], target_role: str) -> SkillGapAnalysis:
    prompt = f"""Analyze the skill gap for someone with skills: {', '.join(current_skills) or 'none listed'} who wants to become a {target_role}.

Provide a comprehensive analysis in JSON format:
{{
  "missingSkills": ["skill1"],
  "skillsToImprove": ["skill1"],
  "strongSkills": ["skill1"],
  "learningPriority": [
    {{"skill": "Skill name", "priority": "High|Medium|Low", "reason": "Why this skill is important", "timeToLearn": "X weeks/months"}}
  ],
  "recommendations": "Detailed paragraph with specific advice on learning path and strategy"
}}

Focus on technical skills specific to {target_role}, soft skills, industry knowledge, tools and valuable certifications."""

    data = _ask_model(prompt, dict)
    if data is not None:
        analysis = SkillGapAnalysis.lenient(data)
        analysis.source = "ai"
        return analysis
    return template_skill_gap(current_skills, target_role)


def template_skill_gap(current_skills: List[str], target_role: str) -> SkillGapAnalysis:
    core = role_skills(target_role)
    known = {skill.lower() for skill in current_skills}
    missing = [skill for skill in core if skill.lower() not in known]
    strong = [skill for skill in current_skills if skill.lower() in {s.lower() for s in core}]

    priorities = []
    for index, skill in enumerate(missing):
        level = "High" if index < 2 else "Medium" if index < 5 else "Low"
        priorities.append({
            "skill": skill,
            "priority": level,
            "reason": f"Core skill for a {target_role}",
            "time_to_learn": "2-4 weeks",
        })

    return SkillGapAnalysis.model_validate({
        "missing_skills": missing,
        "skills_to_improve": [],
        "strong_skills": strong,
        "learning_priority": priorities,
        "recommendations": (
            f"Focus first on {', '.join(missing[:2])} and build a small project with each."
            if missing else f"Your skills already cover the core of a {target_role}; deepen them with projects."
        ),
        "source": "heuristic",
    })


# ============================================
# Resources
# ============================================

def recommend_resources(skill: str, level: str = "beginner") -> List[CareerResource]:
    """Up to eight learning resources for `skill`; empty when AI is unavailable."""
    prompt = f"""Find the best learning resources for "{skill}" at {level} level.
Return a JSON array of up to {MAX_RESOURCES} items with REAL URLs. Format:
[
  {{"title": "Resource title", "type": "video|article|course|practice", "url": "https://real-url.com",
    "duration": "X hours/minutes", "description": "What this resource covers", "source": "Platform name",
    "difficulty": "Beginner|Intermediate|Advanced", "rating": "X.X/5"}}
]"""
    data = _ask_model(prompt, list)
    if data is None:
        return []
    return CareerResource.lenient_list(data)[:MAX_RESOURCES]

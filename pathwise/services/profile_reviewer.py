"""
Review of public professional profiles (LinkedIn, GitHub).

LinkedIn has no public profile API, so its details are supplied by the
user. GitHub profiles are read from the public GitHub REST API.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from pathwise.llm.provider import LLMError
from pathwise.llm.router import get_llm_provider
from pathwise.schemas.profile_review import ProfileAnalysisResult
from pathwise.services.json_repair import JSONRepairError, parse_model_json

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_TIMEOUT = 15.0

REQUIRED_LINKEDIN_FIELDS = ("headline", "summary", "experience", "skills")

SYSTEM_PROMPT = (
    "You are an expert career coach and recruiter who reviews professional online profiles. "
    "Give specific, actionable feedback. Always return valid JSON without markdown formatting."
)


class ProfileFetchError(Exception):
    """The public profile could not be retrieved."""


def validate_profile_url(url: str, profile_type: str) -> bool:
    """Check that `url` is an http(s) URL pointing at a profile of `profile_type`."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False

    host = parsed.netloc.lower()
    if profile_type == "linkedin":
        return "linkedin.com" in host and ("/in/" in url or "/pub/" in url)
    if profile_type == "github":
        return "github.com" in host and len(url.split("/")) >= 4 and bool(github_username(url))
    return False


def github_username(url: str) -> Optional[str]:
    parts = [part for part in urlparse(url).path.split("/") if part]
    return parts[0] if parts else None


def missing_linkedin_fields(linkedin_data: Optional[Dict[str, Any]]) -> List[str]:
    data = linkedin_data or {}
    return [field for field in REQUIRED_LINKEDIN_FIELDS if not data.get(field)]


def fetch_github_profile(url: str) -> Dict[str, Any]:
    """
    Read the user and their most recently updated public repositories.

    Raises:
        ProfileFetchError: unknown user, private profile or GitHub unreachable
    """
    username = github_username(url)
    if not username:
        raise ProfileFetchError("GitHub API error: no username in URL")

    headers = {"Accept": "application/vnd.github+json"}
    try:
        with httpx.Client(base_url=GITHUB_API_URL, timeout=GITHUB_TIMEOUT, headers=headers) as client:
            user_resp = client.get(f"/users/{username}")
            user_resp.raise_for_status()
            repos_resp = client.get(f"/users/{username}/repos", params={"per_page": 100, "sort": "updated"})
            repos_resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning(f"GitHub API returned {e.response.status_code} for {username}")
        raise ProfileFetchError(f"GitHub API error: {e.response.status_code}") from e
    except httpx.RequestError as e:
        logger.warning(f"GitHub API request failed for {username}: {e}")
        raise ProfileFetchError(f"GitHub API error: {e}") from e

    user = user_resp.json()
    repos = [
        {
            "name": repo.get("name"),
            "description": repo.get("description"),
            "language": repo.get("language"),
            "stars": repo.get("stargazers_count", 0),
            "forks": repo.get("forks_count", 0),
            "fork": repo.get("fork", False),
            "updated_at": repo.get("updated_at"),
        }
        for repo in repos_resp.json()
        if isinstance(repo, dict)
    ]
    return {
        "username": username,
        "name": user.get("name"),
        "bio": user.get("bio"),
        "company": user.get("company"),
        "location": user.get("location"),
        "blog": user.get("blog"),
        "followers": user.get("followers", 0),
        "following": user.get("following", 0),
        "public_repos": user.get("public_repos", 0),
        "repos": repos,
    }


def build_profile_prompt(
    profile_type: str,
    profile_url: str,
    profile_data: Dict[str, Any],
    additional_context: Optional[str] = None,
) -> str:
    label = "LinkedIn" if profile_type == "linkedin" else "GitHub"
    return f"""Review this {label} profile and provide detailed feedback in JSON format.

Profile URL: {profile_url}
Profile Data: {profile_data}
Additional Context: {additional_context or 'None'}

Return this exact JSON structure:
{{
  "overallScore": 75,
  "strengths": ["strength1"],
  "weaknesses": ["weakness1"],
  "suggestions": [
    {{"category": "headline|summary|experience|skills|projects|activity", "priority": "high|medium|low",
      "suggestion": "Specific suggestion", "impact": "Expected impact"}}
  ],
  "industryBenchmarks": [
    {{"metric": "Profile Completeness", "userScore": 70, "industryAverage": 75, "recommendation": "..."}}
  ],
  "actionPlan": {{"immediate": ["..."], "shortTerm": ["..."], "longTerm": ["..."]}}
}}"""


def analyze_profile(
    profile_type: str,
    profile_url: str,
    linkedin_data: Optional[Dict[str, Any]] = None,
    additional_context: Optional[str] = None,
) -> ProfileAnalysisResult:
    """
    Review a LinkedIn or GitHub profile.

    Raises:
        ProfileFetchError: the GitHub profile could not be read
    """
    if profile_type == "github":
        profile_data = fetch_github_profile(profile_url)
    else:
        profile_data = linkedin_data or {}

    provider = get_llm_provider()
    if provider is not None:
        try:
            response = provider.complete(
                SYSTEM_PROMPT,
                build_profile_prompt(profile_type, profile_url, profile_data, additional_context),
                temperature=0.7,
            )
            result = ProfileAnalysisResult.lenient(parse_model_json(response, expect=dict))
            result.source = "ai"
            return result
        except (LLMError, JSONRepairError) as e:
            logger.warning(f"AI profile review unusable ({type(e).__name__}: {e}), falling back to rule-based")

    if profile_type == "github":
        return heuristic_github_review(profile_data)
    return heuristic_linkedin_review(profile_data)


def _suggestion(category: str, priority: str, suggestion: str, impact: str) -> dict:
    return {"category": category, "priority": priority, "suggestion": suggestion, "impact": impact}


def _build_result(score: float, strengths, weaknesses, suggestions, metric: str) -> ProfileAnalysisResult:
    score = max(0, min(100, round(score)))
    return ProfileAnalysisResult.model_validate({
        "overall_score": score,
        "strengths": strengths,
        "weaknesses": weaknesses,
        "suggestions": suggestions,
        "industry_benchmarks": [{
            "metric": metric,
            "user_score": score,
            "industry_average": 70,
            "recommendation": "Complete the missing sections to move above average" if score < 70
            else "Keep the profile current",
        }],
        "action_plan": {
            "immediate": [s["suggestion"] for s in suggestions if s["priority"] == "high"],
            "short_term": [s["suggestion"] for s in suggestions if s["priority"] == "medium"],
            "long_term": [s["suggestion"] for s in suggestions if s["priority"] == "low"]
            or ["Review the profile every quarter"],
        },
        "source": "heuristic",
    })


def heuristic_linkedin_review(data: Dict[str, Any]) -> ProfileAnalysisResult:
    """Completeness-based score for user-supplied LinkedIn details."""
    strengths, weaknesses, suggestions = [], [], []
    score = 20

    headline = data.get("headline") or ""
    if headline:
        score += 10
        strengths.append("Has a headline")
        if len(headline) < 40:
            suggestions.append(_suggestion("headline", "medium", "Expand the headline with your specialty and value", "Better search visibility"))
    else:
        weaknesses.append("Missing headline")
        suggestions.append(_suggestion("headline", "high", "Add a headline describing your role and specialty", "First thing recruiters see"))

    summary = data.get("summary") or ""
    if len(summary.split()) >= 40:
        score += 15
        strengths.append("Detailed summary")
    elif summary:
        score += 7
        suggestions.append(_suggestion("summary", "medium", "Expand the About section to at least a short paragraph", "Tells your story"))
    else:
        weaknesses.append("Missing summary")
        suggestions.append(_suggestion("summary", "high", "Write an About section", "Tells your story"))

    experience = data.get("experience") or []
    score += min(len(experience), 3) * 6
    if experience:
        strengths.append(f"{len(experience)} experience entries")
        if not all(entry.get("description") for entry in experience if isinstance(entry, dict)):
            suggestions.append(_suggestion("experience", "medium", "Describe achievements for every position", "Shows impact"))
    else:
        weaknesses.append("No experience listed")

    skills = data.get("skills") or []
    score += min(len(skills), 10)
    if len(skills) < 5:
        weaknesses.append("Few skills listed")
        suggestions.append(_suggestion("skills", "high", "List at least five relevant skills", "Improves recruiter search matches"))
    else:
        strengths.append(f"{len(skills)} skills listed")

    if data.get("education"):
        score += 5
    else:
        suggestions.append(_suggestion("education", "low", "Add your education", "Completes the profile"))

    if data.get("recommendations"):
        score += 5
        strengths.append("Has recommendations")
    else:
        suggestions.append(_suggestion("recommendations", "low", "Ask colleagues for recommendations", "Social proof"))

    if data.get("posts"):
        score += 5
    else:
        suggestions.append(_suggestion("activity", "low", "Share posts about your work regularly", "Builds visibility"))

    return _build_result(score, strengths, weaknesses, suggestions, "Profile Completeness")


def heuristic_github_review(data: Dict[str, Any]) -> ProfileAnalysisResult:
    """Score a GitHub profile on bio, repositories, documentation and community signals."""
    strengths, weaknesses, suggestions = [], [], []
    score = 20
    repos = [repo for repo in data.get("repos", []) if not repo.get("fork")]

    if data.get("bio"):
        score += 10
        strengths.append("Has a bio")
    else:
        weaknesses.append("Missing bio")
        suggestions.append(_suggestion("profile", "high", "Add a bio describing what you build", "Context for visitors"))

    if data.get("name"):
        score += 5
    if data.get("blog"):
        score += 5
        strengths.append("Links to a website")

    score += min(len(repos), 10) * 3
    if len(repos) >= 5:
        strengths.append(f"{len(repos)} original repositories")
    else:
        weaknesses.append("Few original repositories")
        suggestions.append(_suggestion("projects", "high", "Publish more original projects", "Demonstrates skills"))

    described = [repo for repo in repos if repo.get("description")]
    if repos and len(described) < len(repos):
        suggestions.append(_suggestion("projects", "medium", "Add descriptions to every repository", "Easier to evaluate"))
    score += 5 if repos and len(described) == len(repos) else 0

    languages = {repo["language"] for repo in repos if repo.get("language")}
    if len(languages) >= 2:
        strengths.append(f"Works in {len(languages)} languages")
        score += 5

    stars = sum(repo.get("stars") or 0 for repo in repos)
    followers = data.get("followers") or 0
    score += min(stars, 10) + min(followers, 10)
    if stars == 0:
        suggestions.append(_suggestion("activity", "low", "Promote your best projects to gain stars", "Community validation"))

    return _build_result(score, strengths, weaknesses, suggestions, "Profile Strength")

"""
Resume analysis orchestrator.

Builds the analysis prompt, calls the configured language model, repairs
and normalizes its JSON, and falls back to a deterministic rule-based
analysis whenever the model is unavailable or its answer is unusable.
"""
import logging
from typing import Dict, Optional

from pathwise.llm.provider import LLMError
from pathwise.llm.router import get_llm_provider
from pathwise.schemas.resume_review import ResumeAnalysisResult
from pathwise.services.json_repair import JSONRepairError, parse_model_json
from pathwise.services import resume_parser

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert resume analyzer and career coach. You provide comprehensive analysis "
    "of resumes including ATS compatibility, content quality, skills assessment, and actionable "
    "recommendations. Always return valid JSON format without any markdown formatting or extra text."
)

RESULT_SHAPE = """{
  "overallScore": 75,
  "contentAnalysis": {"totalWords": 450, "readabilityScore": 85, "grammarIssues": [], "spellingErrors": [],
                      "toneAnalysis": "Professional/Casual/Mixed", "clarityScore": 80},
  "sectionAnalysis": [{"section": "summary", "score": 80, "strengths": [], "weaknesses": [],
                       "suggestions": [], "wordCount": 50}],
  "skillsAnalysis": {"identifiedSkills": [{"skill": "JavaScript", "relevance": "high", "frequency": 3,
                                           "context": "Used in multiple projects"}],
                     "skillsGap": [], "recommendedSkills": [], "technicalSkills": [], "softSkills": []},
  "experienceAnalysis": {"totalYears": 5, "careerProgression": "Shows clear progression", "achievementCount": 8,
                         "quantifiedAchievements": 4, "actionVerbsUsed": [], "improvementSuggestions": []},
  "atsAnalysis": {"overallScore": 75, "keywordMatch": 70, "formatting": 85, "readability": 80,
                  "recommendations": [], "missingKeywords": [], "foundKeywords": []},
  "industryAnalysis": {"targetIndustry": "Technology", "industryRelevance": 80, "industryKeywords": [],
                       "competitorAnalysis": "How the resume compares", "marketTrends": []},
  "formattingAnalysis": {"structure": "Well-structured", "consistency": 85, "visualAppeal": 80,
                         "length": "Appropriate length", "fontAnalysis": "Professional formatting",
                         "spacingAnalysis": "Good spacing"},
  "recommendations": {"immediate": [], "shortTerm": [], "longTerm": [], "priorityActions": []},
  "industryBenchmarks": [{"metric": "Overall Score", "userScore": 75, "industryAverage": 70,
                          "topPercentile": 90, "recommendation": "..."}],
  "improvementPlan": {"weeklyGoals": [], "monthlyGoals": [], "skillDevelopment": [], "networkingAdvice": []}
}"""

EXPECTED_SECTIONS = ("contact", "summary", "experience", "education", "skills")
TECHNICAL_HINTS = ("javascript", "python", "react", "sql", "java", "typescript", "aws", "docker")


class ResumeAnalysisError(Exception):
    """The resume cannot be analyzed (e.g. no text was extracted)."""


def build_analysis_prompt(
    extracted_text: str,
    target_role: Optional[str] = None,
    target_industry: Optional[str] = None,
    experience_level: Optional[str] = None,
    additional_context: Optional[str] = None,
    file_type: str = "pdf",
) -> str:
    context_line = f"\nAdditional Context: {additional_context}" if additional_context else ""
    return f"""Analyze this resume comprehensively and provide detailed insights in JSON format.

Resume Content:
{extracted_text}

Target Role: {target_role or 'Not specified'}
Target Industry: {target_industry or 'Not specified'}
Experience Level: {experience_level or 'mid'}
File Type: {file_type}{context_line}

Provide analysis in this exact JSON structure:

{RESULT_SHAPE}

Focus on:
1. ATS compatibility and keyword optimization
2. Content quality and readability
3. Skills assessment and gap analysis
4. Achievement quantification
5. Industry-specific recommendations
6. Actionable improvement suggestions

Provide specific, measurable recommendations based on the actual resume content.
Return ONLY valid JSON, no markdown or extra text."""


def analyze_resume(
    extracted_text: str,
    sections: Optional[Dict[str, str]] = None,
    target_role: Optional[str] = None,
    target_industry: Optional[str] = None,
    experience_level: Optional[str] = "mid",
    additional_context: Optional[str] = None,
    file_type: str = "pdf",
) -> ResumeAnalysisResult:
    """
    Analyze resume text with the language model, or with rules when the
    model is unavailable or returns something unusable.

    Raises:
        ResumeAnalysisError: if there is no text to analyze
    """
    if not extracted_text or not extracted_text.strip():
        raise ResumeAnalysisError(
            "No text content found in the resume. Please ensure the file is readable and contains text."
        )

    sections = sections if sections is not None else resume_parser.extract_sections(extracted_text)

    provider = get_llm_provider()
    if provider is None:
        logger.info("No LLM provider configured - using rule-based resume analysis")
        return generate_heuristic_analysis(extracted_text, sections, target_role, target_industry)

    prompt = build_analysis_prompt(
        extracted_text, target_role, target_industry, experience_level, additional_context, file_type
    )
    try:
        response = provider.complete(SYSTEM_PROMPT, prompt, temperature=0.7)
        data = parse_model_json(response, expect=dict)
    except (LLMError, JSONRepairError) as e:
        logger.warning(f"AI resume analysis unusable ({type(e).__name__}: {e}), falling back to rule-based")
        return generate_heuristic_analysis(extracted_text, sections, target_role, target_industry)

    result = normalize_analysis(data)
    logger.info(f"Resume analyzed by AI: overall_score={result.overall_score}")
    return result


def normalize_analysis(data) -> ResumeAnalysisResult:
    """Fill every missing or malformed part of a model answer with its default."""
    result = ResumeAnalysisResult.lenient(data)
    result.source = "ai"
    return result


def _length_label(word_count: int) -> str:
    if word_count > 800:
        return "Too long"
    if word_count < 300:
        return "Too short"
    return "Appropriate"


def generate_heuristic_analysis(
    extracted_text: str,
    sections: Optional[Dict[str, str]] = None,
    target_role: Optional[str] = None,
    target_industry: Optional[str] = None,
) -> ResumeAnalysisResult:
    """Deterministic analysis derived from what the parser can detect."""
    sections = sections or {}
    word_count = resume_parser.count_words(extracted_text)
    skills = resume_parser.extract_skills(extracted_text)
    years = resume_parser.estimate_experience_years(extracted_text, sections.get("experience", ""))
    quantified = resume_parser.extract_quantified_achievements(extracted_text)
    verbs = resume_parser.extract_action_verbs(extracted_text)
    experience_entries = resume_parser.extract_experience(sections.get("experience", ""))
    achievement_count = sum(len(entry["achievements"]) for entry in experience_entries)

    present = [name for name in EXPECTED_SECTIONS if sections.get(name)]
    missing = [name for name in EXPECTED_SECTIONS if not sections.get(name)]
    length = _length_label(word_count)

    score = 35
    score += 5 * len(present)
    score += 2 * min(len(quantified), 5)
    score += min(len(verbs), 10)
    score += min(len(skills), 10)
    score += 10 if length == "Appropriate" else 3
    score = max(0, min(100, score))

    keyword_match = min(100, 50 + 5 * len(skills))
    structure_score = min(100, 50 + 10 * len(present))

    section_analysis = []
    for name in present:
        content = sections[name]
        section_analysis.append({
            "section": name,
            "score": 70,
            "strengths": [f"{name.capitalize()} section present"],
            "weaknesses": [],
            "suggestions": [],
            "word_count": resume_parser.count_words(content),
        })
    if not section_analysis:
        section_analysis.append({
            "section": "overall",
            "score": score,
            "strengths": ["Professional content"],
            "weaknesses": ["No clear section headings detected"],
            "suggestions": ["Organize the resume under standard headings"],
            "word_count": word_count,
        })

    immediate = ["Proofread for errors"]
    if "contact" in missing:
        immediate.append("Add contact information")
    immediate.extend(f"Add a {name} section" for name in missing if name != "contact")

    short_term = []
    if len(quantified) < 3:
        short_term.append("Quantify achievements with numbers, percentages or amounts")
    if len(verbs) < 5:
        short_term.append("Start bullet points with strong action verbs")
    short_term.append("Add relevant keywords for the target role")

    data = {
        "overall_score": score,
        "content_analysis": {
            "total_words": word_count,
            "readability_score": 75,
            "grammar_issues": [],
            "spelling_errors": [],
            "tone_analysis": "Professional",
            "clarity_score": 75,
        },
        "section_analysis": section_analysis,
        "skills_analysis": {
            "identified_skills": [
                {"skill": skill, "relevance": "medium", "frequency": 1, "context": "Found in resume"}
                for skill in skills
            ],
            "skills_gap": ["Industry-specific skills"],
            "recommended_skills": ["Leadership", "Communication"],
            "technical_skills": [s for s in skills if any(hint in s.lower() for hint in TECHNICAL_HINTS)],
            "soft_skills": ["Communication", "Leadership"],
        },
        "experience_analysis": {
            "total_years": years,
            "career_progression": "Shows progression" if len(experience_entries) > 1 else "Unknown",
            "achievement_count": achievement_count,
            "quantified_achievements": len(quantified),
            "action_verbs_used": verbs,
            "improvement_suggestions": ["Add more quantified results"] if len(quantified) < 3 else [],
        },
        "ats_analysis": {
            "overall_score": score,
            "keyword_match": keyword_match,
            "formatting": structure_score,
            "readability": 80,
            "recommendations": ["Add more industry keywords"],
            "missing_keywords": ["Industry-specific terms"],
            "found_keywords": skills[:5],
        },
        "industry_analysis": {
            "target_industry": target_industry or target_role or "Technology",
            "industry_relevance": 70,
            "industry_keywords": ["professional", "experience"],
            "competitor_analysis": "Competitive resume",
            "market_trends": ["Remote work", "Digital skills"],
        },
        "formatting_analysis": {
            "structure": "Well-structured" if len(present) >= 3 else "Needs clearer sections",
            "consistency": 75,
            "visual_appeal": 70,
            "length": length,
            "font_analysis": "Professional formatting",
            "spacing_analysis": "Good spacing",
        },
        "recommendations": {
            "immediate": immediate,
            "short_term": short_term,
            "long_term": ["Gain additional skills", "Build portfolio"],
            "priority_actions": ["Focus on quantified achievements"],
        },
        "industry_benchmarks": [{
            "metric": "Overall Score",
            "user_score": score,
            "industry_average": 75,
            "top_percentile": 90,
            "recommendation": "Good foundation, focus on improvements",
        }],
        "improvement_plan": {
            "weekly_goals": ["Update one section per week"],
            "monthly_goals": ["Complete resume overhaul"],
            "skill_development": ["Learn industry-relevant skills"],
            "networking_advice": ["Connect with industry professionals"],
        },
        "source": "heuristic",
    }
    return ResumeAnalysisResult.model_validate(data)

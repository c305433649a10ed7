"""
Tests for resume reviewer endpoints.
"""
import io
import json
import os

import docx
import pytest

from pathwise.core import config
from pathwise.core.security import create_session_token
from pathwise.db.models.resume_review import ResumeReview

RESUME_LINES = [
    "Jane Doe",
    "jane.doe@example.com",
    "Summary",
    "Backend engineer with 6 years of experience.",
    "Experience",
    "Senior Software Engineer at Acme Corp",
    "- Reduced API latency by 40%",
    "Skills",
    "Python, SQL, Docker",
]

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _docx_bytes(lines=RESUME_LINES):
    document = docx.Document()
    for line in lines:
        document.add_paragraph(line)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _upload(client, headers, filename="resume.docx", data=None, content_type=DOCX_TYPE, **form):
    return client.post(
        "/resume-reviewer/analyze",
        files={"resume": (filename, data if data is not None else _docx_bytes(), content_type)},
        data=form,
        headers=headers,
    )


@pytest.fixture
def review_id(client, auth_headers):
    response = _upload(client, auth_headers, target_role="Backend Engineer")
    assert response.status_code == 200
    return response.json()["review_id"]


def test_analyze_resume(client, auth_headers, db):
    response = _upload(client, auth_headers, target_role="Backend Engineer", experience_level="senior")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["analysis"]["source"] == "heuristic"
    assert data["processing_time"] >= 0

    review = db.get(ResumeReview, data["review_id"])
    assert review.analysis_status == "completed"
    assert review.extracted_text.startswith("Jane Doe")
    assert review.extracted_sections["skills"] == "Python, SQL, Docker"
    assert review.experience_level == "senior"
    assert review.analysis_result["overall_score"] == data["analysis"]["overall_score"]
    assert os.path.exists(review.file_path)
    assert review.file_path.startswith(os.path.join(config.UPLOAD_DIR, "resumes"))


def test_analyze_requires_file(client, auth_headers):
    response = client.post("/resume-reviewer/analyze", data={"target_role": "Engineer"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No resume file uploaded"


def test_analyze_rejects_other_file_types(client, auth_headers):
    response = _upload(client, auth_headers, filename="resume.txt", data=b"plain text", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF, DOC, and DOCX files are allowed"


def test_analyze_rejects_mismatched_content_type(client, auth_headers, db):
    response = _upload(client, auth_headers, filename="cv.docx", content_type="image/png")

    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF, DOC, and DOCX files are allowed"
    assert db.query(ResumeReview).count() == 0


def test_analyze_rejects_large_files(client, auth_headers, monkeypatch):
    monkeypatch.setattr(config, "MAX_RESUME_SIZE", 100)

    response = _upload(client, auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "File too large. Maximum size is 10MB"


def test_analyze_rejects_unknown_experience_level(client, auth_headers):
    response = _upload(client, auth_headers, experience_level="guru")

    assert response.status_code == 400
    assert response.json()["errors"]


def test_unreadable_file_leaves_failed_review(client, auth_headers, db):
    response = _upload(client, auth_headers, data=b"this is not a docx file")

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["review_id"]
    assert db.get(ResumeReview, data["review_id"]).analysis_status == "failed"


def test_document_without_text_fails(client, auth_headers, db):
    response = _upload(client, auth_headers, data=_docx_bytes([""]))

    assert response.status_code == 400
    assert response.json()["message"].startswith("No text content found in the resume")
    assert db.get(ResumeReview, response.json()["review_id"]).analysis_status == "failed"


def test_reanalyze_keeps_extracted_text(client, auth_headers, db, review_id, fake_llm):
    original_text = db.get(ResumeReview, review_id).extracted_text
    fake_llm(json.dumps({"overallScore": 91, "atsAnalysis": {"keywordMatch": 88}}))

    response = client.post(
        f"/resume-reviewer/reanalyze/{review_id}",
        json={"target_role": "Data Engineer", "experience_level": "mid"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["analysis"]["overall_score"] == 91
    assert response.json()["analysis"]["source"] == "ai"

    db.expire_all()
    review = db.get(ResumeReview, review_id)
    assert review.extracted_text == original_text
    assert review.target_role == "Data Engineer"
    assert review.experience_level == "mid"
    assert review.analysis_status == "completed"


def test_reanalyze_without_body_keeps_context(client, auth_headers, db, review_id):
    response = client.post(f"/resume-reviewer/reanalyze/{review_id}", headers=auth_headers)

    assert response.status_code == 200
    db.expire_all()
    assert db.get(ResumeReview, review_id).target_role == "Backend Engineer"


def test_reanalyze_requires_extracted_text(client, auth_headers, db, test_user):
    review = ResumeReview(
        user_id=test_user.id,
        file_name="empty.pdf",
        file_path="/nonexistent/empty.pdf",
        file_type="pdf",
        extracted_text="",
        analysis_status="failed",
    )
    db.add(review)
    db.commit()

    response = client.post(f"/resume-reviewer/reanalyze/{review.id}", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No extracted text available for reanalysis"


def test_list_reviews_with_pagination_and_filter(client, auth_headers):
    for _ in range(3):
        _upload(client, auth_headers)
    _upload(client, auth_headers, data=b"broken")

    page = client.get("/resume-reviewer/reviews", params={"page": 1, "limit": 2}, headers=auth_headers).json()
    assert page["pagination"] == {"total": 4, "page": 1, "limit": 2, "pages": 2}
    assert len(page["reviews"]) == 2
    assert "extracted_text" not in page["reviews"][0]

    completed = client.get("/resume-reviewer/reviews", params={"status": "completed"}, headers=auth_headers).json()
    assert completed["pagination"]["total"] == 3
    assert all(r["analysis_status"] == "completed" for r in completed["reviews"])


def test_get_and_update_review(client, auth_headers, review_id):
    detail = client.get(f"/resume-reviewer/reviews/{review_id}", headers=auth_headers)
    assert detail.status_code == 200
    assert detail.json()["review"]["extracted_text"].startswith("Jane Doe")

    updated = client.put(
        f"/resume-reviewer/reviews/{review_id}",
        json={"rating": 4, "user_notes": "Helpful", "implemented_suggestions": ["Proofread for errors"]},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    review = updated.json()["review"]
    assert review["rating"] == 4
    assert review["user_notes"] == "Helpful"
    assert review["implemented_suggestions"] == ["Proofread for errors"]


def test_update_review_rating_range(client, auth_headers, review_id):
    response = client.put(f"/resume-reviewer/reviews/{review_id}", json={"rating": 6}, headers=auth_headers)

    assert response.status_code == 400


def test_reviews_are_private(client, review_id, user_factory):
    other = user_factory(email="other@example.com")
    headers = {"Authorization": f"Bearer {create_session_token(other)}"}

    assert client.get(f"/resume-reviewer/reviews/{review_id}", headers=headers).status_code == 404
    assert client.delete(f"/resume-reviewer/reviews/{review_id}", headers=headers).status_code == 404


def test_download_and_delete_review(client, auth_headers, db, review_id):
    file_path = db.get(ResumeReview, review_id).file_path

    download = client.get(f"/resume-reviewer/reviews/{review_id}/download", headers=auth_headers)
    assert download.status_code == 200
    with open(file_path, "rb") as f:
        assert download.content == f.read()
    assert download.headers["content-type"] == DOCX_TYPE

    deleted = client.delete(f"/resume-reviewer/reviews/{review_id}", headers=auth_headers)
    assert deleted.status_code == 200
    assert not os.path.exists(file_path)
    assert client.get(f"/resume-reviewer/reviews/{review_id}", headers=auth_headers).status_code == 404


def test_insights(client, auth_headers):
    empty = client.get("/resume-reviewer/insights", headers=auth_headers).json()["insights"]
    assert empty["total_reviews"] == 0

    first = _upload(client, auth_headers).json()["analysis"]["overall_score"]
    _upload(client, auth_headers)

    insights = client.get("/resume-reviewer/insights", headers=auth_headers).json()["insights"]
    assert insights["total_reviews"] == 2
    assert insights["average_score"] == round(first, 1)
    assert len(insights["improvement_trend"]) == 2

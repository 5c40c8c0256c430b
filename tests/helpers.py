from datetime import date, datetime

from sqlalchemy.orm import Session

from observation_tracker.core.rbac import permissions_for_role
from observation_tracker.core.scoring import calculate_crp_evidence, count_look_fors
from observation_tracker.models.framework import Framework
from observation_tracker.models.observation import Observation
from observation_tracker.models.teacher import Teacher
from observation_tracker.models.user import User


def auth(email: str) -> dict:
    return {"X-User-Email": email}


def create_user(db: Session, email: str, role="admin", display_name="User", department="Academics") -> User:
    u = User(
        email=email,
        display_name=display_name,
        role=role,
        department=department,
        permissions=permissions_for_role(role),
        is_active=True,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_teacher(
    db: Session,
    name: str = "Maria Lopez",
    email: str = "maria.lopez@school.edu",
    department: str = "Mathematics",
    subjects: list[str] | None = None,
) -> Teacher:
    t = Teacher(
        name=name,
        email=email,
        department=department,
        grade="9-10",
        subjects=subjects or ["Algebra"],
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


def make_question(qid: str, text: str = "Look-for", **overrides) -> dict:
    q = {
        "id": qid,
        "text": text,
        "type": "rating",
        "required": True,
        "scale": 4,
        "weight": 10,
        "tags": [],
        "help_text": "",
        "framework_alignments": [],
    }
    q.update(overrides)
    return q


def make_section(sid: str, weight: float = 100, questions: list[dict] | None = None, title: str = "Section") -> dict:
    return {
        "id": sid,
        "title": title,
        "description": f"{title} description",
        "weight": weight,
        "questions": questions if questions is not None else [make_question(f"{sid}-q1")],
    }


def create_framework(
    db: Session,
    framework_id: str = "test-framework",
    name: str = "Test Framework",
    status: str = "active",
    sections: list[dict] | None = None,
) -> Framework:
    f = Framework(
        id=framework_id,
        name=name,
        description="Framework used in tests",
        version="1.0",
        status=status,
        last_modified="2025-01-01",
        tags=["test"],
        sections=sections if sections is not None else [make_section("main")],
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )
    db.add(f)
    db.commit()
    db.refresh(f)
    return f


def create_observation(
    db: Session,
    *,
    teacher: Teacher,
    observer: User,
    on: date | None = None,
    status: str = "completed",
    responses: dict[str, str] | None = None,
    duration: int = 45,
    overall_comment: str = "",
    framework_id: str = "crp-in-action",
) -> Observation:
    """responses: question id -> raw value; scores are derived like the recorder does"""
    raw = responses if responses is not None else {"lookfor1": "4", "lookfor2": "2"}
    stamp = datetime.utcnow().isoformat()
    stored = {qid: {"question_id": qid, "value": v, "timestamp": stamp} for qid, v in raw.items()}

    o = Observation(
        teacher_id=teacher.id,
        teacher_name=teacher.name,
        observer_id=observer.id,
        observer_name=observer.display_name,
        framework_id=framework_id,
        date=on or date.today(),
        start_time="09:00",
        duration=duration,
        status=status,
        responses=stored,
        comments={},
        overall_comment=overall_comment,
        class_info={"name": "Period 1", "subject": "Algebra", "room": "101", "period": "1", "grade": "9"},
        crp_evidence_count=calculate_crp_evidence(raw),
        total_look_fors=count_look_fors(raw),
    )
    db.add(o)
    db.commit()
    db.refresh(o)
    return o

# seed_dev.py
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from observation_tracker.core.rbac import permissions_for_role
from observation_tracker.db.base import Base
from observation_tracker.db.session import SessionLocal, engine
import observation_tracker.models  # noqa: F401
from observation_tracker.models.user import User
from observation_tracker.schemas.observation import ObservationCreate
from observation_tracker.schemas.teacher import TeacherCreate
from observation_tracker.services.default_frameworks import CRP_IN_ACTION_ID
from observation_tracker.services.framework_repository import FrameworkRepository
from observation_tracker.services.observation_recorder import ObservationRecorder
from observation_tracker.services.teacher_directory import TeacherDirectory
from observation_tracker.store.document_store import DocumentStore


# ---------- helpers: users ----------

def get_or_create_user(db: Session, email: str, display_name: str, role: str, department: str = "") -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        # keep these up to date in dev
        changed = False
        if u.display_name != display_name:
            u.display_name = display_name
            changed = True
        if u.role != role:
            u.role = role
            u.permissions = permissions_for_role(role)
            changed = True
        if not u.is_active:
            u.is_active = True
            changed = True
        if changed:
            db.commit()
            db.refresh(u)
        return u

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


# ---------- helpers: teachers ----------

TEACHERS = [
    TeacherCreate(name="Maria Lopez", email="maria.lopez@local.test", department="Mathematics",
                  grade="9-10", subjects=["Algebra", "Geometry"]),
    TeacherCreate(name="James Carter", email="james.carter@local.test", department="English",
                  grade="11", subjects=["American Literature"]),
    TeacherCreate(name="Aiko Tanaka", email="aiko.tanaka@local.test", department="Science",
                  grade="9", subjects=["Biology"]),
]


def ensure_teachers(directory: TeacherDirectory) -> list:
    out = []
    for payload in TEACHERS:
        existing = directory.find_by_email(payload.email)
        out.append(existing or directory.create(payload))
    return out


# ---------- helpers: observations ----------

def sample_observation(teacher, observer: User, on: date, ratings: list[str]) -> ObservationCreate:
    stamp = datetime.utcnow()
    responses = {
        f"lookfor{i}": {"question_id": f"lookfor{i}", "value": value, "timestamp": stamp}
        for i, value in enumerate(ratings, start=1)
    }
    return ObservationCreate(
        teacher_id=teacher.id,
        teacher_name=teacher.name,
        observer_id=observer.id,
        observer_name=observer.display_name,
        framework_id=CRP_IN_ACTION_ID,
        date=on,
        start_time="09:00",
        end_time="09:45",
        duration=45,
        status="completed",
        responses=responses,
        overall_comment="Seeded dev observation",
        class_info={
            "name": f"{teacher.subjects[0]} - Period 1" if teacher.subjects else "Period 1",
            "subject": teacher.subjects[0] if teacher.subjects else "",
            "room": "101",
            "period": "1",
            "grade": teacher.grade or "",
        },
    )


# ---------- main ----------

def main():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        store = DocumentStore(db)

        # ---- Users ----
        admin = get_or_create_user(db, "admin@local.test", "Admin Local", "admin", "District Office")
        coordinator = get_or_create_user(db, "coordinator@local.test", "Coordinator Local", "coordinator", "Academics")
        observer = get_or_create_user(db, "observer@local.test", "Observer Local", "observer", "Instructional Coaching")
        teacher_user = get_or_create_user(db, "maria.lopez@local.test", "Maria Lopez", "teacher", "Mathematics")

        # ---- Frameworks ----
        seeded = FrameworkRepository(store).seed_defaults()

        # ---- Teachers ----
        teachers = ensure_teachers(TeacherDirectory(store))
        store.commit()

        # ---- Observations (only on an empty collection) ----
        recorder = ObservationRecorder(store)
        created = []
        if store.count("observations") == 0:
            today = date.today()
            ratings = [
                ["4", "3", "2", "4", "not-observed", "3", "1", "4", "2", "3"],
                ["3", "3", "4", "4", "4", "2", "3", "not-observed", "4", "4"],
                ["1", "2", "2", "not-observed", "3", "1", "2", "2", "3", "1"],
            ]
            for offset, (teacher, values) in enumerate(zip(teachers, ratings)):
                payload = sample_observation(teacher, observer, today - timedelta(days=offset * 3), values)
                created.append(recorder.create(payload))
            store.commit()

        print("\n=== DEV SEED COMPLETE ===")
        print("Users (send as X-User-Email):")
        print(f"  admin:       {admin.email}")
        print(f"  coordinator: {coordinator.email}")
        print(f"  observer:    {observer.email}")
        print(f"  teacher:     {teacher_user.email}")

        print("\nFrameworks:")
        print(f"  seeded: {', '.join(seeded) or '(already present)'}")

        print("\nTeachers:")
        for t in teachers:
            print(f"  {t.id}  {t.name} <{t.email}>")

        print("\nObservations:")
        for o in created:
            print(f"  {o.id}  {o.teacher_name}  crp={o.crp_evidence_count}/{o.total_look_fors}")
        if not created:
            print("  (existing observations left untouched)")

    finally:
        db.close()


if __name__ == "__main__":
    main()

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lms.core.rate_limit import limiter
from lms.core.security import create_access_token
from lms.db.database import Base, get_db
from lms.main import app
from lms.models import Course, Organization, Subject, Unit, User, UserRole, student_courses


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def school(db_session):
    """Two organizations; the first has a teacher, two students, and two courses.

    Student "stu" is enrolled in Algebra only; "other_stu" is enrolled in nothing.
    """
    org = Organization(name="Northside High", slug="northside")
    other_org = Organization(name="Southside High", slug="southside")
    db_session.add_all([org, other_org])
    db_session.flush()

    teacher = User(email="teacher@north.test", full_name="Tina Teacher", role=UserRole.TEACHER, organization_id=org.id)
    stu = User(email="stu@north.test", full_name="Sam Student", role=UserRole.STUDENT, organization_id=org.id)
    other_stu = User(email="other@north.test", full_name="Olive Other", role=UserRole.STUDENT, organization_id=org.id)
    outsider_teacher = User(
        email="teacher@south.test", full_name="Stan South", role=UserRole.TEACHER, organization_id=other_org.id,
    )
    outsider_stu = User(
        email="stu@south.test", full_name="Sue South", role=UserRole.STUDENT, organization_id=other_org.id,
    )
    db_session.add_all([teacher, stu, other_stu, outsider_teacher, outsider_stu])
    db_session.flush()

    math = Subject(name="Mathematics", organization_id=org.id)
    foreign_subject = Subject(name="History", organization_id=other_org.id)
    db_session.add_all([math, foreign_subject])
    db_session.flush()

    algebra = Course(name="Algebra", subject_id=math.id, created_by_user_id=teacher.id)
    geometry = Course(name="Geometry", subject_id=math.id, created_by_user_id=teacher.id)
    foreign_course = Course(name="World History", subject_id=foreign_subject.id, created_by_user_id=outsider_teacher.id)
    db_session.add_all([algebra, geometry, foreign_course])
    db_session.flush()

    unit1 = Unit(name="Linear equations", order=1, course_id=algebra.id)
    unit2 = Unit(name="Quadratics", order=2, course_id=algebra.id)
    db_session.add_all([unit1, unit2])

    db_session.execute(student_courses.insert().values(student_id=stu.id, course_id=algebra.id))
    db_session.execute(student_courses.insert().values(student_id=outsider_stu.id, course_id=foreign_course.id))
    db_session.commit()

    return {
        "org": org, "other_org": other_org,
        "teacher": teacher, "stu": stu, "other_stu": other_stu,
        "outsider_teacher": outsider_teacher, "outsider_stu": outsider_stu,
        "algebra": algebra, "geometry": geometry, "foreign_course": foreign_course,
        "unit1": unit1, "unit2": unit2,
    }


@pytest.fixture()
def auth():
    return auth_headers

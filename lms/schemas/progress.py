import datetime as dt

from pydantic import BaseModel, Field


class DailyProgressCreate(BaseModel):
    assignment_id: int
    score: int | None = Field(default=None, ge=0, le=100)
    time_spent_minutes: int | None = Field(default=None, ge=0)
    completed: bool = False


class DailyProgressResponse(BaseModel):
    id: int
    student_id: int
    assignment_id: int
    date: dt.date
    score: int | None = None
    time_spent_minutes: int | None = None
    completed: bool
    attempts: int
    updated_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class DailyProgressRecorded(BaseModel):
    message: str
    progress: DailyProgressResponse


class WeeklyProgressResponse(BaseModel):
    id: int
    student_id: int
    week_start: dt.date
    week_end: dt.date
    total_score: float
    assignments_completed: int
    average_score: float
    best_day_of_week: str | None = None
    worst_day_of_week: str | None = None

    class Config:
        from_attributes = True


class LearningPatternResponse(BaseModel):
    pattern_type: str
    pattern_data: dict
    updated_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class ProgressSummary(BaseModel):
    total_score: float
    completed_assignments: int
    average_score: float
    total_assignments: int


class DailyAverage(BaseModel):
    date: str  # ISO date string
    average_score: float


class StudentProgressResponse(BaseModel):
    daily_progress: list[DailyProgressResponse]
    weekly_progress: list[WeeklyProgressResponse]
    learning_patterns: list[LearningPatternResponse]
    summary: ProgressSummary
    daily_averages: list[DailyAverage]


class ClassStats(BaseModel):
    total_students: int
    total_assignments: int
    average_score: float
    completion_rate: float


class StudentSummary(BaseModel):
    id: int
    full_name: str
    email: str

    class Config:
        from_attributes = True


class ClassProgressResponse(BaseModel):
    class_progress: list[DailyProgressResponse]
    class_stats: ClassStats
    students: list[StudentSummary]

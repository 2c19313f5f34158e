from datetime import datetime

from extensions import db


class AcademicYear(db.Model):
    __tablename__ = "academic_years"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    # Current term within this year; no FK so the years/terms tables stay acyclic
    current_term_id = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    terms = db.relationship(
        "Term",
        back_populates="academic_year",
        cascade="all, delete-orphan",
        order_by="Term.start_date",
    )
    current_term = db.relationship(
        "Term",
        primaryjoin="foreign(AcademicYear.current_term_id) == Term.id",
        viewonly=True,
        uselist=False,
    )

    @property
    def is_current(self) -> bool:
        settings = db.session.get(SchoolSettings, SchoolSettings.SINGLETON_ID)
        return bool(settings and settings.current_year_id == self.id)


class Term(db.Model):
    __tablename__ = "terms"

    id = db.Column(db.Integer, primary_key=True)
    academic_year_id = db.Column(db.Integer, db.ForeignKey("academic_years.id"), nullable=False)
    name = db.Column(db.String(50), nullable=False)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)

    academic_year = db.relationship("AcademicYear", back_populates="terms")

    @property
    def is_current(self) -> bool:
        return bool(self.academic_year and self.academic_year.current_term_id == self.id)


class SchoolSettings(db.Model):
    """
    Single row holding the current academic year.
    Activating a year is one write to this row.
    """

    __tablename__ = "school_settings"

    SINGLETON_ID = 1

    id = db.Column(db.Integer, primary_key=True)
    current_year_id = db.Column(db.Integer, db.ForeignKey("academic_years.id"), nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    current_year = db.relationship("AcademicYear")

    @classmethod
    def get(cls) -> "SchoolSettings":
        settings = db.session.get(cls, cls.SINGLETON_ID)
        if settings is None:
            settings = cls(id=cls.SINGLETON_ID)
            db.session.add(settings)
            db.session.flush()
        return settings


class Subject(db.Model):
    __tablename__ = "subjects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    code = db.Column(db.String(20), nullable=True)
    level = db.Column(db.String(50), nullable=True)


class ClassLevel(db.Model):
    __tablename__ = "class_levels"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    level = db.Column(db.Integer, nullable=False)

    streams = db.relationship("Stream", back_populates="class_level", order_by="Stream.name")


class Stream(db.Model):
    __tablename__ = "streams"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    class_id = db.Column(db.Integer, db.ForeignKey("class_levels.id"), nullable=False)

    class_level = db.relationship("ClassLevel", back_populates="streams")
    students = db.relationship("Student", back_populates="current_stream")


class TeacherAllocation(db.Model):
    """
    This teacher teaches this subject to this stream for this year.
    """

    __tablename__ = "teacher_allocations"

    id = db.Column(db.Integer, primary_key=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("profile.id"), nullable=False)
    subject_id = db.Column(db.Integer, db.ForeignKey("subjects.id"), nullable=False)
    stream_id = db.Column(db.Integer, db.ForeignKey("streams.id"), nullable=False)
    academic_year_id = db.Column(db.Integer, db.ForeignKey("academic_years.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    teacher = db.relationship("Profile", back_populates="allocations")
    subject = db.relationship("Subject")
    stream = db.relationship("Stream")
    academic_year = db.relationship("AcademicYear")

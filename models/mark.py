from datetime import datetime
import enum

from extensions import db


class AssessmentTypeEnum(str, enum.Enum):
    BOT = "BOT"  # beginning of term
    MOT = "MOT"  # mid term
    EOT = "EOT"  # end of term


class Mark(db.Model):
    """
    A student score for one allocation and assessment period.
    At most one row per (student, allocation, type).
    """

    __tablename__ = "marks"
    __table_args__ = (
        db.UniqueConstraint(
            "student_id",
            "teacher_allocation_id",
            "assessment_type",
            name="uq_marks_student_allocation_type",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("students.id"), nullable=False)
    teacher_allocation_id = db.Column(
        db.Integer,
        db.ForeignKey("teacher_allocations.id"),
        nullable=False,
        index=True,
    )
    assessment_type = db.Column(db.String(3), nullable=False)
    score = db.Column(db.Float, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    student = db.relationship("Student")
    allocation = db.relationship("TeacherAllocation")

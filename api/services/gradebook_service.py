# api/services/gradebook_service.py

from __future__ import annotations

from datetime import datetime
from typing import Mapping

from flask import current_app
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import joinedload

from extensions import db
from models import Mark, Profile, RoleEnum, Stream, Student, TeacherAllocation
from services.grading_rules import grade_band, parse_score
from api.utils.errors import ValidationError


class GradebookService:
    """
    Teacher portal: allocations of the signed-in teacher, the class sheet for
    one allocation and the batched save of marks.
    """

    UPSERT_DIALECTS = {
        "postgresql": postgresql.insert,
        "sqlite": sqlite.insert,
    }
    MARK_KEY = ("student_id", "teacher_allocation_id", "assessment_type")

    @staticmethod
    def allocations_for_teacher(teacher_id: int) -> list[TeacherAllocation]:
        return (
            TeacherAllocation.query.options(
                joinedload(TeacherAllocation.subject),
                joinedload(TeacherAllocation.stream).joinedload(Stream.class_level),
            )
            .filter(TeacherAllocation.teacher_id == teacher_id)
            .order_by(TeacherAllocation.id.asc())
            .all()
        )

    @staticmethod
    def get_allocation(profile: Profile, allocation_id: int, *, for_write: bool = False) -> TeacherAllocation:
        allocation = db.session.get(TeacherAllocation, allocation_id)
        if not allocation:
            raise LookupError("Class allocation not found.")

        if allocation.teacher_id == profile.id:
            return allocation
        if profile.role == RoleEnum.ADMIN and not for_write:
            return allocation
        raise PermissionError("Permission denied: this class is allocated to another teacher.")

    @staticmethod
    def students_for_allocation(allocation: TeacherAllocation, limit: int | None = None) -> list[Student]:
        limit = limit or current_app.config.get("GRADEBOOK_STUDENT_LIMIT", 60)
        return (
            Student.query.filter(Student.current_stream_id == allocation.stream_id)
            .order_by(Student.full_name.asc(), Student.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def existing_marks(allocation_id: int, assessment_type: str) -> dict[int, float]:
        marks = Mark.query.filter_by(
            teacher_allocation_id=allocation_id,
            assessment_type=assessment_type,
        ).all()
        return {mark.student_id: mark.score for mark in marks}

    @classmethod
    def class_sheet(cls, allocation: TeacherAllocation, assessment_type: str) -> dict:
        students = cls.students_for_allocation(allocation)
        marks = cls.existing_marks(allocation.id, assessment_type)
        rows = []
        for student in students:
            score = marks.get(student.id)
            rows.append({"student": student, "score": score, "grade": grade_band(score)})
        return {"assessment_type": assessment_type, "rows": rows}

    @classmethod
    def save_marks(cls, allocation: TeacherAllocation, assessment_type: str, raw_marks: Mapping) -> dict:
        """
        raw_marks maps student id -> what was typed in the cell.

        Valid scores are written in a single insert-or-update keyed by
        (student, allocation, assessment type). Empty cells are skipped and
        invalid ones are reported per row; neither blocks the valid rows.
        """
        if not isinstance(raw_marks, Mapping) or not raw_marks:
            raise ValidationError("marks must be a non-empty object of student id -> score.")

        enrolled = {
            student_id
            for (student_id,) in db.session.query(Student.id)
            .filter(Student.current_stream_id == allocation.stream_id)
            .all()
        }

        now = datetime.utcnow()
        rows: list[dict] = []
        skipped: list[int] = []
        rejected: list[dict] = []

        # "12" and "012" name the same student; the last cell typed wins
        cells: dict[int, object] = {}
        for raw_student_id, raw_score in raw_marks.items():
            try:
                cells[int(raw_student_id)] = raw_score
            except (TypeError, ValueError):
                rejected.append({"student_id": raw_student_id, "error": "Invalid student id."})

        for student_id, raw_score in cells.items():
            if student_id not in enrolled:
                rejected.append({"student_id": student_id, "error": "Student is not enrolled in this stream."})
                continue

            try:
                score = parse_score(raw_score)
            except ValueError as exc:
                rejected.append({"student_id": student_id, "error": str(exc)})
                continue

            if score is None:
                skipped.append(student_id)
                continue

            rows.append({
                "student_id": student_id,
                "teacher_allocation_id": allocation.id,
                "assessment_type": assessment_type,
                "score": score,
                "updated_at": now,
            })

        if rows:
            cls._upsert(rows)
            db.session.commit()
            current_app.logger.info(
                "Saved %s %s marks for allocation %s (%s rejected).",
                len(rows), assessment_type, allocation.id, len(rejected),
            )

        return {"saved": len(rows), "skipped": skipped, "rejected": rejected}

    @classmethod
    def _upsert(cls, rows: list[dict]) -> None:
        dialect = db.session.get_bind().dialect.name
        insert = cls.UPSERT_DIALECTS.get(dialect)

        if insert is not None:
            stmt = insert(Mark.__table__).values(rows)
            stmt = stmt.on_conflict_do_update(
                index_elements=list(cls.MARK_KEY),
                set_={"score": stmt.excluded.score, "updated_at": stmt.excluded.updated_at},
            )
            db.session.execute(stmt)
            return

        # Dialects without ON CONFLICT: one lookup for the whole batch, same transaction.
        allocation_id = rows[0]["teacher_allocation_id"]
        assessment_type = rows[0]["assessment_type"]
        existing = {
            mark.student_id: mark
            for mark in Mark.query.filter(
                Mark.teacher_allocation_id == allocation_id,
                Mark.assessment_type == assessment_type,
                Mark.student_id.in_([row["student_id"] for row in rows]),
            ).all()
        }
        for row in rows:
            mark = existing.get(row["student_id"])
            if mark:
                mark.score = row["score"]
                mark.updated_at = row["updated_at"]
            else:
                db.session.add(Mark(**row))

from datetime import datetime

from extensions import db


class Student(db.Model):
    __tablename__ = "students"

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(255), nullable=False)
    student_id_human = db.Column(db.String(50), nullable=True)
    gender = db.Column(db.String(1), nullable=True)  # 'M' / 'F'
    current_stream_id = db.Column(db.Integer, db.ForeignKey("streams.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    current_stream = db.relationship("Stream", back_populates="students")
    memberships = db.relationship("ClubMember", back_populates="student")


class ClubMember(db.Model):
    __tablename__ = "club_members"

    id = db.Column(db.Integer, primary_key=True)
    club_id = db.Column(db.Integer, db.ForeignKey("clubs.id"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("students.id"), nullable=False)
    role = db.Column(db.String(50), nullable=False, default="member")
    joined_at = db.Column(db.DateTime, default=datetime.utcnow)

    student = db.relationship("Student", back_populates="memberships")

# config.py
import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "super-secret-key"
    _BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    _DEFAULT_DB_PATH = os.path.join(_BASE_DIR, "instance", "school.db")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or f"sqlite:///{_DEFAULT_DB_PATH}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SCHOOL_NAME = os.environ.get("SCHOOL_NAME") or "St. Joseph's"

    # Gradebook / administration lists
    GRADEBOOK_STUDENT_LIMIT = int(os.environ.get("GRADEBOOK_STUDENT_LIMIT", "60") or 60)
    RECENT_ALLOCATIONS_LIMIT = int(os.environ.get("RECENT_ALLOCATIONS_LIMIT", "20") or 20)

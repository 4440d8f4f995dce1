from __future__ import annotations


def seed_document() -> dict:
    """Starter document written when no persisted store exists yet."""
    return {
        "classes": [
            {"id": "8A", "name": "Grade 8A", "subjects": ["Mathematics", "Science", "English"]},
            {"id": "8B", "name": "Grade 8B", "subjects": ["Mathematics", "Science"]},
            {"id": "10B", "name": "Grade 10B", "subjects": ["Mathematics", "Science", "English"]},
        ],
        "teachers": [
            {
                "id": "teacher1",
                "name": "Ms. Johnson",
                "email": "teacher@school.com",
                "classId": "8A",
                "isClassTeacher": True,
                "subject": "Mathematics",
            },
            {
                "id": "teacher2",
                "name": "Mr. Smith",
                "email": "science.teacher@school.com",
                "classId": "8A",
                "isClassTeacher": False,
                "subject": "Science",
            },
        ],
        "students": [],
        "leaves": [],
        "feeConfigs": [],
        "studentFees": [],
        "notices": [],
        "timetables": [],
    }

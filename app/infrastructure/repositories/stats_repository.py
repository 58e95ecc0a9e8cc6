from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..db.models import Subject, System, Marks, Question, Folder, File

from typing import List

HIGH_IMPORTANCE_SCORE = 60
CRITICAL_SCORE = 80


class StatsRepository:

    def __init__(self, db: Session):
        self.db = db

    def _question_highlight(self, question: Question) -> dict:
        marks = question.marks
        system = marks.system if marks else None
        return {
            "id": question.id,
            "title": question.title,
            "repeat_count": question.repeat_count,
            "calculated_score": question.calculated_score,
            "global_importance": question.global_importance,
            "years_appeared": question.years_appeared,
            "created_at": question.created_at,
            "marks_value": marks.value if marks else None,
            "system_name": system.name if system else None,
            "subject_name": system.subject.name if system and system.subject else None,
        }

    def _questions_with_context(self):
        return self.db.query(Question).options(
            joinedload(Question.marks).joinedload(Marks.system).joinedload(System.subject)
        )

    def counts(self) -> dict:
        return {
            "subjects": self.db.query(func.count(Subject.id)).scalar(),
            "systems": self.db.query(func.count(System.id)).scalar(),
            "marks": self.db.query(func.count(Marks.id)).scalar(),
            "questions": self.db.query(func.count(Question.id)).scalar(),
            "folders": self.db.query(func.count(Folder.id)).scalar(),
            "files": self.db.query(func.count(File.id)).scalar(),
        }

    def importance_summary(self) -> dict:
        avg_score = self.db.query(func.avg(Question.calculated_score)).scalar() or 0
        repeated = self.db.query(
            func.count(Question.id), func.coalesce(func.sum(Question.repeat_count), 0)
        ).filter(Question.repeat_count > 1).one()

        return {
            "avg_score": round(float(avg_score), 1),
            "high_importance_count": self.db.query(func.count(Question.id))
            .filter(Question.calculated_score >= HIGH_IMPORTANCE_SCORE)
            .scalar(),
            "critical_count": self.db.query(func.count(Question.id))
            .filter(Question.calculated_score >= CRITICAL_SCORE)
            .scalar(),
            "repeated_questions": int(repeated[0]),
            "total_repeats": int(repeated[1]),
        }

    def recent_subjects(self, limit: int = 5) -> List[dict]:
        subjects = self.db.query(Subject).order_by(Subject.created_at.desc()).limit(limit).all()
        return [{"id": s.id, "name": s.name, "created_at": s.created_at} for s in subjects]

    def recent_questions(self, limit: int = 5) -> List[dict]:
        questions = self._questions_with_context().order_by(Question.created_at.desc()).limit(limit).all()
        return [self._question_highlight(q) for q in questions]

    def featured_questions(self, limit: int = 10) -> List[dict]:
        questions = (
            self._questions_with_context()
            .order_by(Question.calculated_score.desc(), Question.repeat_count.desc())
            .limit(limit)
            .all()
        )
        return [self._question_highlight(q) for q in questions]

    def fetch_stats(self) -> dict:
        counts = self.counts()
        counts["storage"] = int(self.db.query(func.coalesce(func.sum(File.size), 0)).scalar())
        return {
            "counts": counts,
            "importance": self.importance_summary(),
            "recent_activity": {
                "subjects": self.recent_subjects(),
                "questions": self.recent_questions(),
            },
            "featured_questions": self.featured_questions(),
        }

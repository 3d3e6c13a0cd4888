from typing import Any, Dict, Tuple


class NotificationMessageBuilder:
    """Turns lifecycle events into a human-readable subject and body."""

    @staticmethod
    def build_status_update(payload: Dict[str, Any]) -> Tuple[str, str]:
        previous = payload.get('previous_status', '?')
        new = payload.get('new_status', '?')
        subject = f"Application status: {new}"
        body = f"Match {payload.get('match_id')} moved from {previous} to {new}."
        return subject, body

    @staticmethod
    def build_exam_completed(payload: Dict[str, Any]) -> Tuple[str, str]:
        outcome = "passed" if payload.get('passed') else "did not pass"
        title = payload.get('job_title') or 'the job'
        subject = f"Exam completed for {title}"
        body = f"Candidate {payload.get('candidate_id')} scored {payload.get('score')} and {outcome}."
        return subject, body

    @staticmethod
    def build_chat_opened(payload: Dict[str, Any]) -> Tuple[str, str]:
        subject = "A hiring team opened a chat"
        body = f"Chat room {payload.get('room_id')} is open for match {payload.get('match_id')}."
        return subject, body

    @classmethod
    def build(cls, event_type: str, payload: Dict[str, Any]) -> Tuple[str, str]:
        builders = {
            'status_update': cls.build_status_update,
            'exam_completed': cls.build_exam_completed,
            'chat_opened': cls.build_chat_opened,
        }
        builder = builders.get(event_type)
        if builder is None:
            return event_type.replace('_', ' ').capitalize(), str(payload)
        return builder(payload)

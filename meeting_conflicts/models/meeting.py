# meeting_conflicts/models/meeting.py
from sqlalchemy import JSON, Column, Date, Integer, String, Text

from meeting_conflicts.db.base import Base


class Meeting(Base):
    """
    A scheduled meeting.

    Times are stored as zero-padded 'HH:MM' strings so they sort correctly
    within a date; all meetings share one timezone.
    """

    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(Text, nullable=False, default="")
    scheduler_name = Column(String(255), nullable=False, default="")

    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    mandatory_attendees = Column(JSON, nullable=False, default=list)
    optional_attendees = Column(JSON, nullable=False, default=list)

    version = Column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return (
            f"<Meeting id={self.id} date={self.date} "
            f"{self.start_time}-{self.end_time} version={self.version}>"
        )

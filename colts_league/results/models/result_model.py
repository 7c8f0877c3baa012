from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from colts_league.core.database import Base

class Result(Base):
    __tablename__ = "results"

    id = Column(String, primary_key=True, index=True)
    fixture_id = Column("fixtureID", String, ForeignKey("fixtures.id"), nullable=False, index=True)
    home_score = Column("homeScore", Integer, nullable=False, default=0)
    away_score = Column("awayScore", Integer, nullable=False, default=0)
    # Either a list of scorer dicts or the JSON string the admin screen submitted
    home_scorers = Column("homeScorers", JSON)
    away_scorers = Column("awayScorers", JSON)
    submitted_by = Column("submittedBy", String)
    date_submitted = Column("dateSubmitted", DateTime)

    fixture = relationship("Fixture", back_populates="results")

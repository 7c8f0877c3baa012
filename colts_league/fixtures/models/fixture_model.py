import enum
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from colts_league.core.database import Base


class FixtureStatus(enum.IntEnum):
    SCHEDULED = 0
    UNDERWAY = 1
    COMPLETED = 2
    CANCELLED = 3
    ABANDONED = 4


class Fixture(Base):
    __tablename__ = "fixtures"

    id = Column(String, primary_key=True, index=True)
    league_id = Column("leagueID", String, ForeignKey("leagues.id"), nullable=False)
    home_team = Column("homeTeam", String, ForeignKey("teams.id"), nullable=False)
    away_team = Column("awayTeam", String, ForeignKey("teams.id"), nullable=False)
    date = Column(DateTime)
    venue = Column(String(255), nullable=False, default="")
    referee = Column(String)
    status = Column(Integer, nullable=False, default=FixtureStatus.SCHEDULED)

    league = relationship("League", back_populates="fixtures")
    home = relationship("Team", foreign_keys=[home_team], back_populates="home_fixtures")
    away = relationship("Team", foreign_keys=[away_team], back_populates="away_fixtures")
    results = relationship("Result", back_populates="fixture")

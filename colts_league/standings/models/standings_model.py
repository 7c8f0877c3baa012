from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from colts_league.core.database import Base

class Standing(Base):
    __tablename__ = "standings"
    __table_args__ = (
        UniqueConstraint("leagueID", "teamID", name="uq_standings_league_team"),
    )

    id = Column(String, primary_key=True, index=True)
    league_id = Column("leagueID", String, ForeignKey("leagues.id"), nullable=False)
    team_id = Column("teamID", String, ForeignKey("teams.id"), nullable=False)

    # No position column: rank is derived from the full table at read time
    played = Column(Integer, nullable=False, default=0)
    won = Column(Integer, nullable=False, default=0)
    drawn = Column(Integer, nullable=False, default=0)
    lost = Column(Integer, nullable=False, default=0)
    points_for = Column("pointsFor", Integer, nullable=False, default=0)
    points_against = Column("pointsAgainst", Integer, nullable=False, default=0)
    points_difference = Column("pointsDifference", Integer, nullable=False, default=0)
    bonus_points = Column("bonusPoints", Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)

    team = relationship("Team", back_populates="standings")
    league = relationship("League", back_populates="standings")

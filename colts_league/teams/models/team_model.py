from sqlalchemy import Column, String, ForeignKey, Text
from sqlalchemy.orm import relationship
from colts_league.core.database import Base

class Team(Base):
    __tablename__ = "teams"

    id = Column(String, primary_key=True, index=True)
    team_name = Column("teamName", String(50), nullable=False)
    team_club = Column("teamClub", String(50), nullable=False, default="")
    team_logo = Column("teamLogo", Text)  # base64 encoded
    plays_in = Column("playsIn", String, ForeignKey("leagues.id"))

    league = relationship("League", back_populates="teams")
    home_fixtures = relationship("Fixture", foreign_keys="[Fixture.home_team]", back_populates="home")
    away_fixtures = relationship("Fixture", foreign_keys="[Fixture.away_team]", back_populates="away")

    # Define reverse relationship for Standing
    standings = relationship("Standing", back_populates="team")

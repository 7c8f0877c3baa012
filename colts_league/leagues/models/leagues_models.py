from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from colts_league.core.database import Base

class League(Base):
    __tablename__ = "leagues"

    id = Column(String, primary_key=True, index=True)
    league_name = Column("leagueName", String(50), nullable=False)
    league_season = Column("leagueSeason", String(50), nullable=False)  # free text, e.g. "2025-26"

    teams = relationship("Team", back_populates="league")
    fixtures = relationship("Fixture", back_populates="league")
    standings = relationship("Standing", back_populates="league")

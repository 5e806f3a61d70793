from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from db.database import Base, utcnow

MONEY = Numeric(12, 2, asdecimal=True)


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    target_amount = Column(MONEY, nullable=False)
    current_amount = Column(MONEY, nullable=False, default=Decimal("0"))
    deadline = Column(DateTime, nullable=True)
    # kept equal to current_amount >= target_amount by the donation ledger
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    donations = relationship("Donation", back_populates="goal")

    @property
    def donation_count(self) -> int:
        return len(self.donations)


class Donation(Base):
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(MONEY, nullable=False)
    donor_name = Column(String, nullable=True)
    message = Column(Text, nullable=True)
    anonymous = Column(Boolean, nullable=False, default=False)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)

    goal = relationship("Goal", back_populates="donations")

    @property
    def goal_title(self):
        return self.goal.title if self.goal is not None else None

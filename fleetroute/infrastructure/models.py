"""
SQLAlchemy ORM models.

Tables
------
* ``route_queries`` -- one summary row per route-planning request
  (origin, mode, how many candidates were ranked, and the winner).

Indexes
-------
* **B-Tree** on ``created_at`` for the newest-first history listing and on
  ``mode`` for per-mode filtering.
"""

from sqlalchemy import Column, DateTime, Enum, Float, Index, Integer, String, func

from .database import Base
from fleetroute.domain.enums import OptimizationMode


class RouteQueryModel(Base):
    __tablename__ = "route_queries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    origin_lat = Column(Float, nullable=False)
    origin_lng = Column(Float, nullable=False)
    mode = Column(Enum(OptimizationMode), nullable=False)
    candidate_count = Column(Integer, default=0, nullable=False)

    # Best-ranked candidate (nullable when every destination was rejected)
    best_label = Column(String(120), nullable=True)
    best_destination_lat = Column(Float, nullable=True)
    best_destination_lng = Column(Float, nullable=True)
    best_distance_km = Column(Float, nullable=True)
    best_score = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_route_queries_created", "created_at"),
        Index("idx_route_queries_mode", "mode"),
    )

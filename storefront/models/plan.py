from sqlalchemy import Column, String, DateTime, Boolean, Integer, Numeric, JSON
from sqlalchemy.orm import relationship
from storefront.core.database import Base
from datetime import datetime


class Plan(Base):
    __tablename__ = "plans"

    id = Column(String, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)  # 'gratis', 'basico', 'profissional', 'enterprise'
    price = Column(Numeric(10, 2), nullable=False)  # Monthly price
    max_products = Column(Integer, nullable=True)  # null = unlimited
    max_orders = Column(Integer, nullable=True)  # per calendar month, null = unlimited
    features = Column(JSON, nullable=False, default=list)  # Store as array
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    subscriptions = relationship("Subscription", back_populates="plan")

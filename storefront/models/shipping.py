from sqlalchemy import Column, String, DateTime, Boolean, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from storefront.core.database import Base
from datetime import datetime


class ShippingConfig(Base):
    __tablename__ = "shipping_configs"

    id = Column(String, primary_key=True, index=True)
    store_id = Column(String, ForeignKey("stores.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    free_shipping_threshold = Column(Numeric(10, 2), nullable=True)
    default_shipping_cost = Column(Numeric(10, 2), default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="shipping_config")


class ShippingZone(Base):
    __tablename__ = "shipping_zones"

    id = Column(String, primary_key=True, index=True)
    store_id = Column(String, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)  # e.g. 'Sao Paulo Capital'
    zip_code_start = Column(String(8), nullable=False)
    zip_code_end = Column(String(8), nullable=False)
    shipping_cost = Column(Numeric(10, 2), nullable=False)
    estimated_days = Column(Integer, default=7)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="shipping_zones")

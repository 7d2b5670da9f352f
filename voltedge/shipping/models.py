"""
Shipping Models
Reference tables for shipping methods, weight-banded shipping rates and tax rates.
"""

from datetime import datetime
from voltedge.extensions import db
from sqlalchemy import CheckConstraint, Index


class ShippingMethod(db.Model):
    """
    Carrier service offered at checkout (Standard, Express, Next Day).
    """
    __tablename__ = 'shipping_methods'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(50), unique=True, nullable=False)  # 'standard', 'express', 'next_day'
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    estimated_days = db.Column(db.String(100), nullable=True)  # e.g., "5-7 business days"
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    default_cost = db.Column(db.Numeric(10, 2), nullable=False, default=0)  # Used when no tier matches
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    rates = db.relationship('ShippingRate', backref='shipping_method', lazy=True,
                            cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint('default_cost >= 0', name='check_default_cost_non_negative'),
    )

    def __repr__(self):
        return f'<ShippingMethod {self.key}: {self.name}>'

    def to_dict(self):
        """Convert shipping method to dictionary."""
        return {
            'id': self.id,
            'key': self.key,
            'name': self.name,
            'description': self.description,
            'estimatedDays': self.estimated_days,
            'isActive': self.is_active,
            'defaultCost': float(self.default_cost) if self.default_cost is not None else 0.0,
        }


class ShippingRate(db.Model):
    """
    Flat shipping cost for a method, destination and weight band.
    An empty country is the catch-all "rest of world" row; a NULL state
    applies to every state of the country.
    """
    __tablename__ = 'shipping_rates'

    id = db.Column(db.Integer, primary_key=True)
    shipping_method_id = db.Column(db.Integer, db.ForeignKey('shipping_methods.id', ondelete='CASCADE'),
                                   nullable=False, index=True)
    country = db.Column(db.String(3), nullable=False, default='', index=True)
    state = db.Column(db.String(10), nullable=True)
    min_weight = db.Column(db.Numeric(10, 3), nullable=False)  # kg, inclusive
    max_weight = db.Column(db.Numeric(10, 3), nullable=False)  # kg, inclusive
    cost = db.Column(db.Numeric(10, 2), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('min_weight <= max_weight', name='check_rate_min_max_weight'),
        CheckConstraint('cost >= 0', name='check_rate_cost_non_negative'),
        Index('idx_rate_method_country_state', 'shipping_method_id', 'country', 'state'),
    )

    def __repr__(self):
        region = f'{self.country or "*"}/{self.state or "*"}'
        return f'<ShippingRate {self.id}: {region} {self.min_weight}-{self.max_weight}kg = ${self.cost}>'

    def to_dict(self):
        """Convert shipping rate to dictionary."""
        return {
            'id': self.id,
            'shippingMethodId': self.shipping_method_id,
            'country': self.country,
            'state': self.state,
            'minWeight': float(self.min_weight),
            'maxWeight': float(self.max_weight),
            'cost': float(self.cost),
        }

    def contains_weight(self, weight) -> bool:
        """Bands are inclusive at both ends."""
        return self.min_weight <= weight <= self.max_weight

    def overlaps_with(self, other) -> bool:
        """
        Check if this rate's weight band intersects another rate's band.
        Only the bands are compared; callers decide which rows are comparable.
        """
        # Ranges overlap if: min1 <= max2 AND min2 <= max1
        return self.min_weight <= other.max_weight and other.min_weight <= self.max_weight

    def covers(self, other) -> bool:
        """True when this rate's band contains the whole of another rate's band."""
        return self.min_weight <= other.min_weight and other.max_weight <= self.max_weight


class TaxRate(db.Model):
    """
    Sales tax / VAT rate for a country, optionally narrowed to a state.
    An empty country is the default international rate.
    """
    __tablename__ = 'tax_rates'

    id = db.Column(db.Integer, primary_key=True)
    country = db.Column(db.String(3), nullable=False, default='', index=True)
    state = db.Column(db.String(10), nullable=True)
    rate = db.Column(db.Numeric(6, 4), nullable=False)  # Decimal fraction, 0.0725 = 7.25%
    description = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint('rate >= 0 AND rate <= 1', name='check_tax_rate_fraction'),
        Index('idx_tax_country_state', 'country', 'state'),
    )

    def __repr__(self):
        return f'<TaxRate {self.country or "*"}/{self.state or "*"}: {self.rate}>'

    def to_dict(self):
        """Convert tax rate to dictionary."""
        return {
            'id': self.id,
            'country': self.country,
            'state': self.state,
            'rate': float(self.rate),
            'description': self.description,
            'isActive': self.is_active,
        }

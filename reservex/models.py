from . import db
from datetime import datetime

class OverlayCollection(db.Model):
    """One row per entity kind; payload is the full JSON array of Tier 1 records."""
    __tablename__ = "overlay_collections"
    kind = db.Column(db.String(32), primary_key=True)
    payload = db.Column(db.Text, nullable=False, default="[]")
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

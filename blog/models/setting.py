"""
Site Setting Model
"""

from blog.extensions import db


class SiteSetting(db.Model):
    """One key/value row per site setting"""
    __tablename__ = 'site_settings'
    
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(120), unique=True, nullable=False, index=True)
    value = db.Column(db.Text, nullable=False, default='')
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())
    
    def __repr__(self):
        return f'<SiteSetting {self.key}>'

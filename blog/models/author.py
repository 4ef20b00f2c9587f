"""
Author Model
"""

from blog.extensions import db


class Author(db.Model):
    """Byline shown on posts. Independent of back-office users."""
    __tablename__ = 'authors'
    
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    avatar = db.Column(db.String(500))
    bio = db.Column(db.Text)
    social = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())
    
    posts = db.relationship('Post', backref='author', lazy=True)
    
    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'avatar': self.avatar,
            'bio': self.bio,
            'social': self.social or {},
        }
    
    def __repr__(self):
        return f'<Author {self.name}>'

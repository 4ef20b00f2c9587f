"""
Post Model
"""

import enum

from blog.extensions import db


class PostStatus(str, enum.Enum):
    DRAFT = 'DRAFT'
    PUBLISHED = 'PUBLISHED'


post_tags = db.Table(
    'post_tags',
    db.Column('post_id', db.Integer, db.ForeignKey('posts.id'), primary_key=True),
    db.Column('tag_id', db.Integer, db.ForeignKey('tags.id'), primary_key=True),
)


class Post(db.Model):
    """Blog post"""
    __tablename__ = 'posts'
    
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.Text, nullable=False, default='')
    content = db.Column(db.Text, nullable=False)
    cover_image = db.Column(db.String(500))
    date = db.Column(db.DateTime, default=db.func.current_timestamp(), index=True)
    featured = db.Column(db.Boolean, default=False, nullable=False)
    status = db.Column(db.String(20), default=PostStatus.DRAFT.value, nullable=False)
    views = db.Column(db.Integer, default=0, nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey('authors.id'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())
    
    tags = db.relationship('Tag', secondary=post_tags, lazy='subquery',
                           backref=db.backref('posts', lazy=True))
    
    @property
    def is_published(self):
        return self.status == PostStatus.PUBLISHED.value
    
    def to_dict(self, with_content=True):
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'excerpt': self.excerpt,
            'coverImage': self.cover_image,
            'date': self.date.isoformat() if self.date else None,
            'featured': self.featured,
            'status': self.status,
            'views': self.views,
            'authorId': self.author_id,
            'categoryId': self.category_id,
            'author': self.author.to_dict() if self.author else None,
            'category': self.category.to_dict() if self.category else None,
            'tags': [t.to_dict() for t in self.tags],
        }
        if with_content:
            data['content'] = self.content
        return data
    
    def __repr__(self):
        return f'<Post {self.slug}>'

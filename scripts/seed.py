"""Load sample authors, categories, tags and posts.

Usage:
  python scripts/seed.py

Existing rows (matched by slug or name) are left alone.
"""

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blog import create_app
from blog.models import Author, Category, Tag, Post, PostStatus
from blog.services import authors, posts, taxonomy

CATEGORIES = [
    ('Technology', 'Latest in tech and development'),
    ('Tutorial', 'Step-by-step guides and tutorials'),
    ('News', 'Latest updates and announcements'),
]

TAGS = ['Python', 'Flask', 'SQLAlchemy', 'Testing']

POSTS = [
    {
        'title': 'Getting Started with Flask',
        'category': 'tutorial',
        'tags': ['python', 'flask'],
        'featured': True,
        'content': (
            '# Getting Started with Flask\n\n'
            'Flask is a small framework that stays out of your way. In this guide we cover '
            'the application factory, blueprints and templates.\n\n'
            '## Blueprints\n\nGroup related views and register them on the app.'
        ),
    },
    {
        'title': 'Modelling a Blog with SQLAlchemy',
        'category': 'technology',
        'tags': ['python', 'sqlalchemy'],
        'featured': False,
        'content': (
            '# Modelling a Blog\n\n'
            'Posts, authors, categories and tags map cleanly onto a handful of tables '
            'and one association table.'
        ),
    },
]


def main():
    app = create_app()
    with app.app_context():
        author = Author.query.filter_by(name='John Doe').first() or authors.create_author(
            'John Doe',
            bio='Full-stack developer writing about Python on the web.',
            social={'github': 'https://github.com/johndoe'},
        )
        print('Author:', author.name)
        
        for name, description in CATEGORIES:
            if Category.query.filter_by(name=name).first() is None:
                taxonomy.create_category(name, description=description)
        print('Categories:', ', '.join(c.name for c in Category.query.order_by(Category.name)))
        
        for name in TAGS:
            if Tag.query.filter_by(name=name).first() is None:
                taxonomy.create_tag(name)
        print('Tags:', ', '.join(t.name for t in Tag.query.order_by(Tag.name)))
        
        for entry in POSTS:
            category = Category.query.filter_by(slug=entry['category']).first()
            tag_ids = [t.id for t in Tag.query.filter(Tag.slug.in_(entry['tags'])).all()]
            existing = Post.query.filter_by(title=entry['title']).first()
            if existing is not None:
                continue
            post = posts.create_post({
                'title': entry['title'],
                'content': entry['content'],
                'author_id': author.id,
                'category_id': category.id,
                'featured': entry['featured'],
                'status': PostStatus.PUBLISHED.value,
                'tag_ids': tag_ids,
            })
            print('Created post:', post.slug)


if __name__ == '__main__':
    main()

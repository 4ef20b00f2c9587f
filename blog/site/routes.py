"""
Site Routes
"""

from flask import render_template, request, abort, current_app

from blog.errors import NotFound
from blog.services import authors, posts, taxonomy
from blog.services.content import calculate_read_time
from blog.site import site_bp


def _page():
    return max(request.args.get('page', 1, type=int), 1)


def _per_page():
    return current_app.config['POSTS_PER_PAGE']


@site_bp.route('/')
def index():
    """Featured posts plus the first page of recent posts"""
    return render_template('site/index.html',
                           featured=posts.featured_posts(),
                           pagination=posts.list_published(page=1, per_page=_per_page()))


@site_bp.route('/posts')
def post_list():
    return render_template('site/posts.html',
                           heading='All Posts',
                           pagination=posts.list_published(page=_page(), per_page=_per_page()))


@site_bp.route('/posts/<slug>')
def post_detail(slug):
    try:
        post = posts.get_published_by_slug(slug)
    except NotFound:
        abort(404)
    posts.record_view(post)
    return render_template('site/post.html', post=post,
                           read_time=calculate_read_time(post.content))


@site_bp.route('/categories')
def category_list():
    return render_template('site/categories.html', categories=taxonomy.list_categories(published_only=True))


@site_bp.route('/categories/<slug>')
def category_detail(slug):
    try:
        category = taxonomy.get_category_by_slug(slug)
    except NotFound:
        abort(404)
    return render_template('site/posts.html',
                           heading=category.name,
                           description=category.description,
                           pagination=posts.list_published(page=_page(), per_page=_per_page(),
                                                           category_id=category.id))


@site_bp.route('/tags')
def tag_list():
    return render_template('site/tags.html', tags=taxonomy.list_tags(published_only=True))


@site_bp.route('/tags/<slug>')
def tag_detail(slug):
    try:
        tag = taxonomy.get_tag_by_slug(slug)
    except NotFound:
        abort(404)
    return render_template('site/posts.html',
                           heading=f'#{tag.name}',
                           pagination=posts.list_published(page=_page(), per_page=_per_page(),
                                                           tag_id=tag.id))


@site_bp.route('/authors')
def author_list():
    return render_template('site/authors.html', authors=authors.list_authors(published_only=True))


@site_bp.route('/authors/<int:author_id>')
def author_detail(author_id):
    try:
        author = authors.get_author(author_id)
    except NotFound:
        abort(404)
    return render_template('site/posts.html',
                           heading=author.name,
                           description=author.bio,
                           pagination=posts.list_published(page=_page(), per_page=_per_page(),
                                                           author_id=author.id))


@site_bp.route('/search')
def search():
    query = request.args.get('q', '').strip()
    return render_template('site/search.html', query=query, results=posts.search_posts(query))


@site_bp.route('/about')
def about():
    return render_template('site/about.html')

"""
Admin Routes

CRUD screens for posts, authors, categories, tags, users, settings and
media. Service errors come back as BlogError and are shown as banners.
"""

import logging

from flask import render_template, request, redirect, url_for, flash

from blog.admin import admin_bp
from blog.auth.guard import admin_required
from blog.auth.session import set_session_cookie
from blog.errors import BlogError
from blog.models import PostStatus, Role
from blog.services import authors, blob, posts, settings, taxonomy, users
from blog.services.content import calculate_read_time

logger = logging.getLogger(__name__)


def _post_form():
    form = request.form
    return {
        'title': form.get('title', '').strip(),
        'slug': form.get('slug', '').strip(),
        'content': form.get('content', ''),
        'excerpt': form.get('excerpt', '').strip(),
        'cover_image': form.get('cover_image', '').strip(),
        'featured': form.get('featured'),
        'status': form.get('status') or PostStatus.DRAFT.value,
        'date': form.get('date') or None,
        'author_id': form.get('author_id'),
        'category_id': form.get('category_id'),
        'tag_ids': form.getlist('tag_ids'),
    }


def _social_form():
    return {network: request.form.get(f'social_{network}', '')
            for network in authors.SOCIAL_NETWORKS}


def _post_choices():
    return {
        'authors': [a for a, _ in authors.list_authors()],
        'categories': [c for c, _ in taxonomy.list_categories()],
        'tags': [t for t, _ in taxonomy.list_tags()],
        'statuses': [s.value for s in PostStatus],
    }


@admin_bp.route('/')
@admin_required
def admin_index(session):
    return redirect(url_for('admin.admin_dashboard'))


@admin_bp.route('/dashboard')
@admin_required
def admin_dashboard(session):
    """Counts, recent posts and most-read posts."""
    try:
        stats = posts.counts()
        recent = posts.recent_posts()
        top = posts.top_posts()
    except BlogError as e:
        flash(e.message, 'danger')
        stats, recent, top = {}, [], []
    
    return render_template('admin/dashboard.html',
                           stats=stats,
                           recent_posts=recent,
                           top_posts=top,
                           identity=session)


# Posts

@admin_bp.route('/posts')
@admin_required
def manage_posts(session):
    return render_template('admin/posts.html', posts=posts.list_for_admin(),
                           read_time=calculate_read_time)


@admin_bp.route('/posts/create', methods=['GET', 'POST'])
@admin_required
def create_post(session):
    if request.method == 'POST':
        data = _post_form()
        try:
            post = posts.create_post(data)
            flash(f'Post "{post.title}" created successfully.', 'success')
            return redirect(url_for('admin.manage_posts'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/post_form.html', post=None, form=data, **_post_choices()), e.status_code
    
    return render_template('admin/post_form.html', post=None, form={}, **_post_choices())


@admin_bp.route('/posts/<int:post_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_post(post_id, session):
    try:
        post = posts.get_post(post_id)
    except BlogError as e:
        flash(e.message, 'danger')
        return redirect(url_for('admin.manage_posts'))
    
    if request.method == 'POST':
        data = _post_form()
        try:
            posts.update_post(post_id, data)
            flash('Post updated successfully.', 'success')
            return redirect(url_for('admin.manage_posts'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/post_form.html', post=post, form=data, **_post_choices()), e.status_code
    
    form = {
        'title': post.title, 'slug': post.slug, 'content': post.content,
        'excerpt': post.excerpt, 'cover_image': post.cover_image or '',
        'featured': post.featured, 'status': post.status,
        'date': post.date.strftime('%Y-%m-%d') if post.date else '',
        'author_id': str(post.author_id), 'category_id': str(post.category_id),
        'tag_ids': [str(t.id) for t in post.tags],
    }
    return render_template('admin/post_form.html', post=post, form=form, **_post_choices())


@admin_bp.route('/posts/<int:post_id>/delete', methods=['POST'])
@admin_required
def delete_post(post_id, session):
    try:
        posts.delete_post(post_id)
        flash('Post deleted successfully.', 'success')
    except BlogError as e:
        flash(f'Could not delete post: {e.message}', 'danger')
    return redirect(url_for('admin.manage_posts'))


# Categories

@admin_bp.route('/categories')
@admin_required
def manage_categories(session):
    return render_template('admin/categories.html', categories=taxonomy.list_categories())


@admin_bp.route('/categories/create', methods=['GET', 'POST'])
@admin_required
def create_category(session):
    if request.method == 'POST':
        form = request.form
        try:
            category = taxonomy.create_category(form.get('name'), form.get('slug'), form.get('description'))
            flash(f'Category "{category.name}" added successfully.', 'success')
            return redirect(url_for('admin.manage_categories'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/category_form.html', category=None, form=form), e.status_code
    
    return render_template('admin/category_form.html', category=None, form={})


@admin_bp.route('/categories/<int:category_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_category(category_id, session):
    try:
        category = taxonomy.get_category(category_id)
    except BlogError as e:
        flash(e.message, 'danger')
        return redirect(url_for('admin.manage_categories'))
    
    if request.method == 'POST':
        form = request.form
        try:
            taxonomy.update_category(category_id, form.get('name'), form.get('slug'), form.get('description'))
            flash('Category updated successfully.', 'success')
            return redirect(url_for('admin.manage_categories'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/category_form.html', category=category, form=form), e.status_code
    
    form = {'name': category.name, 'slug': category.slug, 'description': category.description or ''}
    return render_template('admin/category_form.html', category=category, form=form)


@admin_bp.route('/categories/<int:category_id>/delete', methods=['POST'])
@admin_required
def delete_category(category_id, session):
    try:
        taxonomy.delete_category(category_id)
        flash('Category deleted successfully.', 'success')
    except BlogError as e:
        flash(f'Could not delete category: {e.message}', 'danger')
    return redirect(url_for('admin.manage_categories'))


# Tags

@admin_bp.route('/tags', methods=['GET', 'POST'])
@admin_required
def manage_tags(session):
    """List tags, add new tags."""
    if request.method == 'POST':
        try:
            tag = taxonomy.create_tag(request.form.get('name'), request.form.get('slug'))
            flash(f'Tag "{tag.name}" added successfully.', 'success')
        except BlogError as e:
            flash(e.message, 'danger')
        return redirect(url_for('admin.manage_tags'))
    
    return render_template('admin/tags.html', tags=taxonomy.list_tags())


@admin_bp.route('/tags/<int:tag_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_tag(tag_id, session):
    try:
        tag = taxonomy.get_tag(tag_id)
    except BlogError as e:
        flash(e.message, 'danger')
        return redirect(url_for('admin.manage_tags'))
    
    if request.method == 'POST':
        try:
            taxonomy.update_tag(tag_id, request.form.get('name'), request.form.get('slug'))
            flash('Tag updated successfully.', 'success')
            return redirect(url_for('admin.manage_tags'))
        except BlogError as e:
            flash(e.message, 'danger')
    
    return render_template('admin/tag_form.html', tag=tag)


@admin_bp.route('/tags/<int:tag_id>/delete', methods=['POST'])
@admin_required
def delete_tag(tag_id, session):
    try:
        taxonomy.delete_tag(tag_id)
        flash('Tag deleted successfully.', 'success')
    except BlogError as e:
        flash(f'Could not delete tag: {e.message}', 'danger')
    return redirect(url_for('admin.manage_tags'))


# Authors

@admin_bp.route('/authors')
@admin_required
def manage_authors(session):
    return render_template('admin/authors.html', authors=authors.list_authors())


@admin_bp.route('/authors/create', methods=['GET', 'POST'])
@admin_required
def create_author(session):
    if request.method == 'POST':
        form = request.form
        try:
            author = authors.create_author(form.get('name'), form.get('avatar'), form.get('bio'), _social_form())
            flash(f'Author "{author.name}" added successfully.', 'success')
            return redirect(url_for('admin.manage_authors'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/author_form.html', author=None, form=form,
                                   social=_social_form(), networks=authors.SOCIAL_NETWORKS), e.status_code
    
    return render_template('admin/author_form.html', author=None, form={}, social={},
                           networks=authors.SOCIAL_NETWORKS)


@admin_bp.route('/authors/<int:author_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_author(author_id, session):
    try:
        author = authors.get_author(author_id)
    except BlogError as e:
        flash(e.message, 'danger')
        return redirect(url_for('admin.manage_authors'))
    
    if request.method == 'POST':
        form = request.form
        try:
            authors.update_author(author_id, form.get('name'), form.get('avatar'), form.get('bio'), _social_form())
            flash('Author updated successfully.', 'success')
            return redirect(url_for('admin.manage_authors'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/author_form.html', author=author, form=form,
                                   social=_social_form(), networks=authors.SOCIAL_NETWORKS), e.status_code
    
    form = {'name': author.name, 'avatar': author.avatar or '', 'bio': author.bio or ''}
    return render_template('admin/author_form.html', author=author, form=form,
                           social=author.social or {}, networks=authors.SOCIAL_NETWORKS)


@admin_bp.route('/authors/<int:author_id>/delete', methods=['POST'])
@admin_required
def delete_author(author_id, session):
    try:
        authors.delete_author(author_id)
        flash('Author deleted successfully.', 'success')
    except BlogError as e:
        flash(f'Could not delete author: {e.message}', 'danger')
    return redirect(url_for('admin.manage_authors'))


# Users

@admin_bp.route('/users')
@admin_required
def manage_users(session):
    return render_template('admin/users.html', users=users.list_users(), identity=session)


@admin_bp.route('/users/create', methods=['GET', 'POST'])
@admin_required
def create_user(session):
    roles = [r.value for r in Role]
    if request.method == 'POST':
        form = request.form
        try:
            user = users.create_user(form.get('name'), form.get('email'), form.get('password'), form.get('role'))
            flash(f'User "{user.email}" created successfully.', 'success')
            return redirect(url_for('admin.manage_users'))
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/user_form.html', user=None, form=form, roles=roles), e.status_code
    
    return render_template('admin/user_form.html', user=None, form={}, roles=roles)


@admin_bp.route('/users/<int:user_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_user(user_id, session):
    roles = [r.value for r in Role]
    try:
        user = users.get_user(user_id)
    except BlogError as e:
        flash(e.message, 'danger')
        return redirect(url_for('admin.manage_users'))
    
    if request.method == 'POST':
        form = request.form
        try:
            user, previous_email = users.update_user(user_id, form.get('name'), form.get('email'),
                                                     form.get('password') or None, form.get('role'))
            flash('User updated successfully.', 'success')
            response = redirect(url_for('admin.manage_users'))
            if user.id == session.user.id and user.email != previous_email:
                set_session_cookie(response, user.email, host=request.host)
            return response
        except BlogError as e:
            flash(e.message, 'danger')
            return render_template('admin/user_form.html', user=user, form=form, roles=roles), e.status_code
    
    form = {'name': user.name or '', 'email': user.email, 'role': (user.role or '').upper()}
    return render_template('admin/user_form.html', user=user, form=form, roles=roles)


@admin_bp.route('/users/<int:user_id>/delete', methods=['POST'])
@admin_required
def delete_user(user_id, session):
    try:
        users.delete_user(user_id, session)
        flash('User deleted successfully.', 'success')
    except BlogError as e:
        flash(f'Could not delete user: {e.message}', 'danger')
    return redirect(url_for('admin.manage_users'))


# Settings

@admin_bp.route('/settings', methods=['GET', 'POST'])
@admin_required
def admin_settings(session):
    """Site title, SEO, social links and footer."""
    if request.method == 'POST':
        values = {key: request.form.get(key, '') for key in settings.DEFAULT_SETTINGS
                  if key in request.form}
        try:
            settings.update_batch(values)
            flash('Settings updated successfully.', 'success')
        except BlogError as e:
            flash(e.message, 'danger')
        return redirect(url_for('admin.admin_settings'))
    
    return render_template('admin/settings.html', values=settings.get_all(),
                           keys=list(settings.DEFAULT_SETTINGS))


# Media

@admin_bp.route('/media', methods=['GET', 'POST'])
@admin_required
def manage_media(session):
    if request.method == 'POST':
        try:
            result = blob.upload_image(request.files.get('file'),
                                       folder=request.form.get('folder') or 'uploads')
            flash(f'Image uploaded: {result["url"]}', 'success')
        except BlogError as e:
            flash(e.message, 'danger')
        return redirect(url_for('admin.manage_media'))
    
    return render_template('admin/media.html', images=blob.list_images(),
                           configured=blob.is_configured())

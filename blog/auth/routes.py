"""
Auth Routes

The session cookie holds the user's email in plaintext and is re-resolved
against the database on every request (see blog.auth.session).
"""

import logging

from flask import render_template, request, redirect, url_for, flash, jsonify, current_app

from blog.auth import auth_bp
from blog.auth.credentials import authenticate
from blog.auth.session import resolve_session, set_session_cookie, clear_session_cookie

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'


@auth_bp.route('/api/auth/login', methods=['POST'])
def api_login():
    """JSON login: {email, password} -> user summary and session cookie."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    email = data.get('email') or ''
    password = data.get('password') or ''
    if isinstance(email, str):
        email = email.strip()
    
    if not email or not password or not isinstance(email, str) or not isinstance(password, str):
        return jsonify({'success': False, 'message': 'Email and password are required'}), 400
    
    user = authenticate(email, password)
    if user is None:
        return jsonify({'success': False, 'message': INVALID_CREDENTIALS}), 401
    
    response = jsonify({
        'success': True,
        'message': 'Login successful',
        'user': {
            'id': user.id,
            'name': user.name,
            'email': user.email,
            'role': (user.role or '').upper(),
        },
    })
    logger.info('User %s signed in', user.id)
    return set_session_cookie(response, user.email, host=request.host)


@auth_bp.route('/api/auth/logout', methods=['POST'])
def api_logout():
    """Always succeeds, whatever the caller's current state."""
    response = jsonify({'success': True, 'message': 'Logged out successfully'})
    return clear_session_cookie(response)


@auth_bp.route('/api/auth/session')
def api_session():
    """Who the cookie currently resolves to."""
    return jsonify(resolve_session(request.cookies).to_dict())


@auth_bp.route('/admin/login', methods=['GET', 'POST'])
def admin_login():
    """Server-rendered login form. Already-signed-in visitors never reach
    this view; the edge gate sends them to the dashboard."""
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        
        if not email or not password:
            flash('Please enter both email and password.', 'danger')
            return render_template('admin/login.html', email=email), 400
        
        user = authenticate(email, password)
        if user is None:
            flash(INVALID_CREDENTIALS + '.', 'danger')
            return render_template('admin/login.html', email=email), 401
        
        flash(f'Welcome back, {user.name or user.email}!', 'success')
        response = redirect(current_app.config['DASHBOARD_PATH'])
        return set_session_cookie(response, user.email, host=request.host)
    
    return render_template('admin/login.html', email='')


@auth_bp.route('/admin/logout', methods=['GET', 'POST'])
def admin_logout():
    flash('You have been logged out of the admin panel.', 'info')
    response = redirect(url_for('auth.admin_login'))
    return clear_session_cookie(response)

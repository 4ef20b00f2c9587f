"""
Configuration settings for the blog and its admin back-office
"""
import os


class Config:
    """Flask application configuration"""
    
    # Flask secret key for flash messages
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'blog.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # 'production' turns on the Secure cookie attribute
    ENVIRONMENT = os.environ.get('BLOG_ENV') or 'development'
    
    # Admin session cookie (value is the signed-in user's email)
    AUTH_COOKIE_NAME = 'admin-auth'
    AUTH_COOKIE_MAX_AGE = 60 * 60 * 24
    
    # Admin areas guarded by the edge gate
    ADMIN_PREFIX = '/admin'
    ADMIN_API_PREFIX = '/api/admin'
    LOGIN_PATH = '/admin/login'
    LOGOUT_PATH = '/admin/logout'
    DASHBOARD_PATH = '/admin/dashboard'
    
    # Blob store for image uploads
    BLOB_READ_WRITE_TOKEN = os.environ.get('BLOB_READ_WRITE_TOKEN')
    BLOB_API_URL = os.environ.get('BLOB_API_URL') or 'https://blob.vercel-storage.com'
    BLOB_TIMEOUT = 15
    BLOB_PLACEHOLDER_URL = 'https://placehold.co/600x400?text=Blob+Storage+Not+Configured'
    UPLOAD_ALLOWED_TYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp', 'image/svg+xml')
    UPLOAD_MAX_BYTES = 5 * 1024 * 1024
    
    # Public listings
    POSTS_PER_PAGE = 10
    
    # Seed administrator (used by scripts/create_admin.py and first boot)
    ADMIN_NAME = os.environ.get('ADMIN_NAME') or 'Admin User'
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL') or 'admin@example.com'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'admin123'
    SEED_ADMIN = True


class ProductionConfig(Config):
    ENVIRONMENT = 'production'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    ENVIRONMENT = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BLOB_READ_WRITE_TOKEN = None
    SEED_ADMIN = False

"""Create (or promote) an administrator account.

Usage:
  python scripts/create_admin.py --email admin@example.com --password '...' --name 'Admin User'

Defaults come from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME.
"""

import argparse
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blog import create_app
from blog.config import Config
from blog.services import users


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('--email', default=Config.ADMIN_EMAIL)
    ap.add_argument('--password', default=Config.ADMIN_PASSWORD)
    ap.add_argument('--name', default=Config.ADMIN_NAME)
    args = ap.parse_args()
    
    app = create_app()
    with app.app_context():
        user, created = users.ensure_admin(args.name, args.email, args.password)
    
    if created:
        print(f'New admin user created: {user.email}')
    else:
        print(f'Existing user promoted to admin: {user.email}')


if __name__ == '__main__':
    main()

import os
import django

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')
django.setup()

import logging

from django.contrib.auth.models import User
from accounts.models import Profile

logger = logging.getLogger('create_admin')


def create_admin():
    username = os.getenv('DJANGO_SUPERUSER_USERNAME', 'admin')
    email = os.getenv('DJANGO_SUPERUSER_EMAIL', 'admin@pawedaran.com')
    password = os.getenv('DJANGO_SUPERUSER_PASSWORD')

    if not password:
        logger.error("DJANGO_SUPERUSER_PASSWORD is not set; superadmin not created.")
        return None

    user = User.objects.filter(username=username).first()
    if user is None:
        user = User.objects.create_superuser(username, email, password)
        logger.info("Superadmin '%s' created.", username)
    else:
        logger.info("User '%s' already exists.", username)

    Profile.objects.update_or_create(user=user, defaults={'role': Profile.SUPERADMIN})
    return user


if __name__ == "__main__":
    create_admin()

"""Test settings.

File-backed SQLite, so threads share one test database; eager Celery
and a fast password hasher. Used by pytest through
DJANGO_SETTINGS_MODULE=config.settings.test.
"""

import os

from .base import *  # noqa: F401,F403

DEBUG = False

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
        'OPTIONS': {'transaction_mode': 'IMMEDIATE', 'timeout': 20},
        'TEST': {'NAME': os.environ.get('TEST_DB_NAME', str(BASE_DIR / 'test-db.sqlite3'))},
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

# Tasks run inline; no broker needed
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

WALLET_FACILITY_REVENUE_SHARE = '0.85'
WALLET_TRANSACTIONS_DEFAULT_LIMIT = 50

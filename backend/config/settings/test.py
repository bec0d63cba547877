"""
Test settings for Backgammon analysis project.
"""
from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Short rollouts keep the suite fast
BACKGAMMON_ENGINE = {
    'HEURISTIC_CACHE_SIZE': 10000,
    'HEURISTIC_SCALE': 1.0,
    'ROLLOUT_MAX_PLIES': 6,
    'MAX_WORKERS': 2,
    'DEFAULT_DEADLINE_SECONDS': 30.0,
    'MAX_SIMULATIONS': 500,
}

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

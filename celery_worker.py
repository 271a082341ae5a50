"""
Celery worker entry point for lifehub background jobs.

Run with:
    celery -A celery_worker.celery worker --loglevel=info
"""

import os
from dotenv import load_dotenv

dotenv_path = os.path.join(os.path.dirname(__file__), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)

from lifehub import create_app
from lifehub.extensions import celery
from lifehub.tasks.episode_import import import_episodes_task

# Tasks run inside this app's context when no request context is active
app = create_app()

__all__ = ['app', 'celery', 'import_episodes_task']

if __name__ == '__main__':
    celery.worker_main(['worker', f"--loglevel={app.config['LOG_LEVEL'].lower()}"])

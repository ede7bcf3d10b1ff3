# gunicorn_config.py
import multiprocessing
import os

# Listen address and port
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Workers: (2 * CPU cores) + 1
workers = multiprocessing.cpu_count() * 2 + 1

worker_class = 'sync'

worker_connections = 1000

# Logs
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "/data/projects/equisecure/logs/gunicorn_access.log")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "/data/projects/equisecure/logs/gunicorn_error.log")
loglevel = "info"

proc_name = 'gunicorn_equisecure'

# Plan generation runs in Celery, so requests stay short.
timeout = 30

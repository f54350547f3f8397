"""
Gunicorn configuration for the Baakh API.

    gunicorn -c baakh/gunicorn_config.py
"""

import multiprocessing
import os
from dotenv import load_dotenv

load_dotenv()

wsgi_app = "baakh.app:create_app()"

# Server socket
bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '10000')}"
backlog = 2048

# Worker processes
workers = int(os.getenv('WEB_CONCURRENCY', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = 30
keepalive = 2

proc_name = 'baakh-api'

# Logging goes to stdout/stderr; structlog formats the application lines
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Limits
limit_request_line = 4096
limit_request_fields = 100
limit_request_field_size = 8190

reload = os.getenv('FLASK_ENV', 'production') == 'development'


def on_starting(server):
    server.log.info("Starting Baakh API...")


def post_fork(server, worker):
    server.log.info(f"Worker spawned (pid: {worker.pid})")


def when_ready(server):
    server.log.info("Server is ready. Spawning workers...")

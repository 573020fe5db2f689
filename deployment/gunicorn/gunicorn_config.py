"""
Gunicorn configuration for the Zyph website API.

    gunicorn -c deployment/gunicorn/gunicorn_config.py core.wsgi
"""
import os

from dotenv import load_dotenv

load_dotenv()

wsgi_app = "core.wsgi:application"
bind = f"0.0.0.0:{os.getenv('PORT', '3001')}"
workers = int(os.getenv('WEB_CONCURRENCY', '2'))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Contact submissions wait for both notification emails
timeout = int(float(os.getenv('CONTACT_NOTIFICATION_TIMEOUT', '30'))) + 30
keepalive = 5

# Logging to stdout/stderr for the container runtime
accesslog = "-"
errorlog = "-"
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

proc_name = "zyph-web-api"

daemon = False


def when_ready(server):
    server.log.info("Zyph website API listening on %s", bind)


def worker_abort(worker):
    """Called when a worker is killed for exceeding the timeout."""
    worker.log.warning("Worker %s aborted (request exceeded %ss)", worker.pid, timeout)

"""
Gunicorn settings for the LinguaQuest API.

    gunicorn -c gunicorn.conf.py "app:create_app()"
"""

import os

bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:5000')
backlog = 2048

# Each request is a short synchronous database transaction, except sentence
# generation which may walk several LLM models; threads absorb that latency.
worker_class = 'gthread'
workers = int(os.environ.get('GUNICORN_WORKERS', 4))
threads = int(os.environ.get('GUNICORN_THREADS', 4))

timeout = 60
graceful_timeout = 30
keepalive = 5

# Recycle workers periodically to cap memory growth
max_requests = 1000
max_requests_jitter = 100

# Access log in combined format plus request time (microseconds); application
# logs are JSON lines from middleware/logging.py
accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s "%(a)s" %(D)sus'

proc_name = 'linguaquest-api'

# The database pool opens lazily inside each worker, never in the master
preload_app = False

forwarded_allow_ips = os.environ.get('FORWARDED_ALLOW_IPS', '127.0.0.1')


def on_starting(server):
    server.log.info(
        f"linguaquest-api starting: {workers} workers x {threads} threads, "
        f"timeout {timeout}s, bind {bind}"
    )


def post_fork(server, worker):
    server.log.info(f"linguaquest-api worker {worker.pid} forked")


def worker_abort(worker):
    worker.log.warning(f"linguaquest-api worker {worker.pid} aborted after {timeout}s timeout")

"""
Gunicorn configuration for the Stretch Tracker API.

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 2)

With more than one worker use STORE_BACKEND=sql or json. The json backend
locks its data file across processes; the memory backend keeps a separate
dataset in each worker.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "stretch_tracker.main:app"

keepalive = 5

# Kill a worker that hasn't responded in 60 s.
timeout = 60

# Logs to stdout; application logs are structlog JSON lines.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30

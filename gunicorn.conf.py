"""
Gunicorn configuration for the Streakboard production server.

Tuned for Railway / Render single-instance containers.
Env vars that override defaults:
  PORT    : TCP port to bind (Railway sets this automatically)
  WORKERS : number of worker processes (default: 2)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# 2 workers fit a 512 MB container.
workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Requests are short CRUD calls; anything near this is a stuck worker.
timeout = 60

# stdout only (Railway / Render capture it). App loggers use streakboard.*
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30

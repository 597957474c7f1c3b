"""Gunicorn configuration for production.

Run with: gunicorn -c gunicorn_config.py "chatdesk:create_app()"
"""
import os

# Server socket
port = os.getenv("PORT", "8000")
bind = f"0.0.0.0:{port}"
backlog = 2048

# Worker processes
# The console state lives in the process, so exactly one worker serves it.
# Concurrency comes from threads; simulated replies use their own pool.
workers = 1
worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", "8"))
timeout = 60
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
capture_output = True

# Process naming
proc_name = "chatdesk"

# Server mechanics
daemon = False
pidfile = None
umask = 0

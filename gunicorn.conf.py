import multiprocessing
import os

# Server socket
bind = f"{os.getenv('API_HOST', '0.0.0.0')}:{os.getenv('API_PORT', '8000')}"
backlog = 2048

# Worker processes
workers = int(os.getenv('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000

# A generation request runs up to MAX_REGENERATION_ATTEMPTS generator calls,
# each bounded by ATTEMPT_TIMEOUT_SECONDS, plus scoring and the audit write
_attempts = int(os.getenv('MAX_REGENERATION_ATTEMPTS', '3'))
_attempt_timeout = float(os.getenv('ATTEMPT_TIMEOUT_SECONDS', '30'))
timeout = int(os.getenv('GUNICORN_TIMEOUT', _attempts * _attempt_timeout * 2 + 30))
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")

# Process naming
proc_name = "content_gate"
